"""Request dispatch.

This module turns a `RequestSpec` into exactly one call on an injected
`HttpTransport` and classifies what came back. Transport exceptions never
leave this module: every outcome is returned as a `RequestOutcome` value.

The one exception that does escape is `InvalidJsonPayload`, raised when a
`--json` payload does not parse. An inline `-d '{...}'` payload that does not
parse is only a recoverable `RequestRejected`. The two paths are kept
distinct on purpose.
"""

from __future__ import annotations

import json
import logging
from typing import Callable

from tinycurl.core.domain.models import (
    CONNECT_FAILURE_MESSAGE,
    FormBody,
    HttpFailure,
    HttpMethod,
    InvalidJsonPayload,
    JsonBody,
    RequestOutcome,
    RequestRejected,
    RequestSpec,
    Success,
    TransportErrorKind,
    TransportFailure,
    ValidatedUrl,
)
from tinycurl.core.interfaces.transport import (
    ConnectFailed,
    HttpTransport,
    TransportError,
    TransportResponse,
)
from tinycurl.core.services.formatter import parse_json

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def ensure_json_payload(raw: str) -> None:
    """Raise `InvalidJsonPayload` unless `raw` is valid JSON."""

    try:
        parse_json(raw)
    except (ValueError, RecursionError) as exc:
        raise InvalidJsonPayload(str(exc)) from exc


def _error_text(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


class RequestDispatcher:
    """Sends one request through `transport` and classifies the result."""

    def __init__(self, transport: HttpTransport) -> None:
        self._transport = transport

    def dispatch(self, spec: RequestSpec, target: ValidatedUrl) -> RequestOutcome:
        # Checked before anything else so a bad --json never reaches the network.
        if isinstance(spec.body, JsonBody):
            ensure_json_payload(spec.body.raw)

        try:
            method = HttpMethod(spec.method)
        except ValueError:
            logger.debug("unsupported method %r", spec.method)
            return RequestRejected.unsupported_method()

        if method is HttpMethod.GET:
            logger.debug("GET %s", target.raw)
            return self._send(lambda: self._transport.get(target.raw))

        body = spec.body
        if body is None:
            return RequestRejected.missing_data()
        if isinstance(body, JsonBody):
            return self._post(target, JSON_CONTENT_TYPE, body.raw)
        return self._post_form(target, body)

    def _post_form(self, target: ValidatedUrl, body: FormBody) -> RequestOutcome:
        if not body.raw.startswith("{"):
            return self._post(target, FORM_CONTENT_TYPE, body.raw)

        try:
            value = parse_json(body.raw)
        except (ValueError, RecursionError) as exc:
            return RequestRejected.invalid_json_data(str(exc))
        payload = json.dumps(value, ensure_ascii=False, separators=(",", ":"), sort_keys=True)
        return self._post(target, JSON_CONTENT_TYPE, payload)

    def _post(self, target: ValidatedUrl, content_type: str, payload: str) -> RequestOutcome:
        logger.debug("POST %s (%s, %d chars)", target.raw, content_type, len(payload))
        headers = {"Content-Type": content_type}
        return self._send(lambda: self._transport.post(target.raw, headers, payload))

    def _send(self, call: Callable[[], TransportResponse]) -> RequestOutcome:
        try:
            response = call()
        except ConnectFailed as exc:
            logger.debug("connect failed: %s", exc)
            return TransportFailure(kind=TransportErrorKind.CONNECT, message=CONNECT_FAILURE_MESSAGE)
        except TransportError as exc:
            logger.debug("transport error: %s", exc)
            return TransportFailure(kind=TransportErrorKind.OTHER, message=_error_text(exc))

        status = response.status_code
        logger.debug("response status %d", status)
        if not 200 <= status < 300:
            response.close()
            return HttpFailure(status=status)

        try:
            text = response.read_text()
        except TransportError as exc:
            logger.debug("body read failed: %s", exc)
            return TransportFailure(kind=TransportErrorKind.BODY, message=_error_text(exc))
        return Success(body=text)
