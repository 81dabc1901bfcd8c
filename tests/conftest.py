"""Shared fixtures for the tinycurl test suite."""

from __future__ import annotations

from typing import Callable, Mapping

import pytest

from tinycurl.core.domain.models import ValidatedUrl
from tinycurl.core.interfaces.transport import TransportError
from tinycurl.core.services.url_validator import validate_url


class FakeResponse:
    """In-memory `TransportResponse`."""

    def __init__(
        self,
        status_code: int = 200,
        text: str = "",
        *,
        read_error: TransportError | None = None,
    ) -> None:
        self._status_code = status_code
        self._text = text
        self._read_error = read_error
        self.read_called = False
        self.closed = False

    @property
    def status_code(self) -> int:
        return self._status_code

    def read_text(self) -> str:
        self.read_called = True
        if self._read_error is not None:
            raise self._read_error
        return self._text

    def close(self) -> None:
        self.closed = True


class FakeTransport:
    """`HttpTransport` test double that records every call."""

    def __init__(
        self,
        response: FakeResponse | None = None,
        *,
        error: TransportError | None = None,
    ) -> None:
        self.response = response or FakeResponse()
        self.error = error
        self.calls: list[tuple[str, str, dict[str, str], str | None]] = []

    def _reply(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url: str) -> FakeResponse:
        self.calls.append(("GET", url, {}, None))
        return self._reply()

    def post(self, url: str, headers: Mapping[str, str], body: str) -> FakeResponse:
        self.calls.append(("POST", url, dict(headers), body))
        return self._reply()


@pytest.fixture
def fake_transport() -> Callable[..., FakeTransport]:
    """Factory: `fake_transport(FakeResponse(...))` or `fake_transport(error=...)`."""

    def factory(response: FakeResponse | None = None, **kwargs) -> FakeTransport:
        return FakeTransport(response, **kwargs)

    return factory


@pytest.fixture
def target() -> ValidatedUrl:
    validated = validate_url("http://example.com/api")
    assert isinstance(validated, ValidatedUrl)
    return validated


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep stray `.env` files and colour settings out of the tests."""

    monkeypatch.chdir(tmp_path)
    for name in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(name, raising=False)
    for name in (
        "TINYCURL_HTTP_TIMEOUT_SECONDS",
        "TINYCURL_CONNECT_TIMEOUT_SECONDS",
        "TINYCURL_FOLLOW_REDIRECTS",
        "TINYCURL_MAX_REDIRECTS",
        "TINYCURL_USER_AGENT",
        "TINYCURL_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
