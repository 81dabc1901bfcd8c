"""Tests for the httpx-backed transport, driven by `httpx.MockTransport`."""

from __future__ import annotations

from typing import Callable, Iterator

import httpx
import pytest

from tinycurl.adapters.http_client import HttpxTransport, build_client
from tinycurl.core.config import AppSettings
from tinycurl.core.domain.models import (
    CONNECT_FAILURE_MESSAGE,
    HttpFailure,
    RequestSpec,
    Success,
    TransportErrorKind,
    TransportFailure,
)
from tinycurl.core.interfaces.transport import (
    BodyReadFailed,
    ConnectFailed,
    HttpTransport,
    TransportError,
)
from tinycurl.core.services.dispatcher import RequestDispatcher
from tinycurl.core.services.url_validator import validate_url


def _settings(**overrides) -> AppSettings:
    return AppSettings(_env_file=None, **overrides)


def _transport(
    handler: Callable[[httpx.Request], httpx.Response],
    **overrides,
) -> HttpxTransport:
    client = build_client(_settings(**overrides), transport=httpx.MockTransport(handler))
    return HttpxTransport(client=client)


class BrokenStream(httpx.SyncByteStream):
    def __iter__(self) -> Iterator[bytes]:
        yield b"partial"
        raise httpx.ReadError("connection reset by peer")


class TrackedStream(httpx.SyncByteStream):
    def __init__(self) -> None:
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        yield b"Not Found"

    def close(self) -> None:
        self.closed = True


def test_satisfies_the_transport_protocol() -> None:
    with _transport(lambda request: httpx.Response(200)) as transport:
        assert isinstance(transport, HttpTransport)


def test_get_reads_text_and_sends_user_agent() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="<h1>Hello, World!</h1>")

    with _transport(handler, user_agent="tinycurl-test/1.0") as transport:
        response = transport.get("http://example.com/page")
        assert response.status_code == 200
        assert response.read_text() == "<h1>Hello, World!</h1>"

    assert seen[0].method == "GET"
    assert seen[0].headers["User-Agent"] == "tinycurl-test/1.0"


def test_post_sends_headers_and_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": 101})

    with _transport(handler) as transport:
        response = transport.post(
            "http://example.com/posts",
            {"Content-Type": "application/x-www-form-urlencoded"},
            "userId=1&title=Hello World",
        )
        assert response.status_code == 201

    assert seen[0].method == "POST"
    assert seen[0].headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert seen[0].content == b"userId=1&title=Hello World"


def test_redirects_are_followed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(302, headers={"Location": "http://example.com/new"})
        return httpx.Response(200, text="moved here")

    with _transport(handler) as transport:
        response = transport.get("http://example.com/old")
        assert response.status_code == 200
        assert response.read_text() == "moved here"


def test_redirects_can_be_disabled() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(302, headers={"Location": "http://example.com/new"})

    with _transport(handler, follow_redirects=False) as transport:
        assert transport.get("http://example.com/old").status_code == 302


def test_too_many_redirects_is_a_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(302, headers={"Location": "http://example.com/loop"})

    with _transport(handler, max_redirects=2) as transport:
        with pytest.raises(TransportError) as excinfo:
            transport.get("http://example.com/loop")
    assert not isinstance(excinfo.value, ConnectFailed)


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("[Errno -2] Name or service not known"),
        httpx.ConnectTimeout("timed out"),
    ],
)
def test_connect_errors_map_to_connect_failed(error: Exception) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise error

    with _transport(handler) as transport:
        with pytest.raises(ConnectFailed):
            transport.get("http://unreachable.invalid/")


def test_other_errors_keep_their_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("The read operation timed out")

    with _transport(handler) as transport:
        with pytest.raises(TransportError, match="The read operation timed out") as excinfo:
            transport.get("http://slow.example/")
    assert not isinstance(excinfo.value, ConnectFailed)


def test_body_read_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=BrokenStream())

    with _transport(handler) as transport:
        response = transport.get("http://example.com/")
        with pytest.raises(BodyReadFailed, match="connection reset by peer"):
            response.read_text()


def test_error_status_response_is_closed_unread() -> None:
    stream = TrackedStream()
    spec = RequestSpec.from_cli("http://example.com/missing")
    target = validate_url(spec.url)

    with _transport(lambda request: httpx.Response(404, stream=stream)) as transport:
        outcome = RequestDispatcher(transport).dispatch(spec, target)
        assert stream.closed

    assert outcome == HttpFailure(status=404)


def test_build_client_applies_timeouts() -> None:
    client = build_client(_settings(http_timeout_seconds=7.5, connect_timeout_seconds=2.0))
    try:
        assert client.timeout.connect == 2.0
        assert client.timeout.read == 7.5
        assert client.follow_redirects is True
    finally:
        client.close()


def test_dispatch_through_httpx_reports_unreachable_host() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("[Errno -2] Name or service not known", request=request)

    spec = RequestSpec.from_cli("https://example.rs")
    target = validate_url(spec.url)
    with _transport(handler) as transport:
        outcome = RequestDispatcher(transport).dispatch(spec, target)

    assert outcome == TransportFailure(kind=TransportErrorKind.CONNECT, message=CONNECT_FAILURE_MESSAGE)


def test_dispatch_through_httpx_returns_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Content-Type"] == "application/json"
        return httpx.Response(201, content=request.content)

    spec = RequestSpec.from_cli("https://dummyjson.com/posts/add", json_data='{"title": "World"}')
    target = validate_url(spec.url)
    with _transport(handler) as transport:
        outcome = RequestDispatcher(transport).dispatch(spec, target)

    assert outcome == Success(body='{"title": "World"}')
