"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and redirect policy in one place.
- Translates httpx exceptions into the transport contract of
  `tinycurl.core.interfaces.transport`, so the core never imports httpx.
- Eases testing: pass an `httpx.MockTransport` and no socket is opened.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Mapping

import httpx

from tinycurl.core.config import AppSettings
from tinycurl.core.interfaces.transport import BodyReadFailed, ConnectFailed, TransportError

logger = logging.getLogger(__name__)


def build_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` with sane defaults.

    Why a builder:
    - Centralizes timeouts/headers so every request behaves the same.
    - A hung server must not block forever, so a connect and an overall
      timeout always apply.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "*/*",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(
            settings.http_timeout_seconds,
            connect=settings.connect_timeout_seconds,
        ),
        follow_redirects=settings.follow_redirects,
        max_redirects=settings.max_redirects,
        headers=headers,
        transport=transport,
    )


class HttpxResponse:
    """Streaming `httpx.Response` adapted to `TransportResponse`."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    def read_text(self) -> str:
        try:
            self._response.read()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise BodyReadFailed(str(exc)) from exc
        finally:
            self._response.close()
        return self._response.text

    def close(self) -> None:
        self._response.close()


class HttpxTransport:
    """`HttpTransport` backed by a synchronous `httpx.Client`."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or build_client(settings)

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get(self, url: str) -> HttpxResponse:
        return self._send("GET", url)

    def post(self, url: str, headers: Mapping[str, str], body: str) -> HttpxResponse:
        return self._send("POST", url, headers=dict(headers), content=body.encode("utf-8"))

    def _send(self, method: str, url: str, **kwargs: Any) -> HttpxResponse:
        try:
            request = self._client.build_request(method, url, **kwargs)
            response = self._client.send(request, stream=True)
        except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
            raise ConnectFailed(str(exc)) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(str(exc)) from exc
        logger.debug("%s %s -> %d", method, response.url, response.status_code)
        return HttpxResponse(response)
