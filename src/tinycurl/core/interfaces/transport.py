"""HTTP transport contract.

Why Protocol:
- Defines a structural contract (duck typing) without rigid inheritance.
- The dispatcher can be driven by httpx, by `httpx.MockTransport`, or by a
  hand-written fake in tests, without changing core behavior.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable


class TransportError(Exception):
    """Raised by a transport when no usable response was obtained."""


class ConnectFailed(TransportError):
    """DNS resolution, TCP connect or TLS handshake failed."""


class BodyReadFailed(TransportError):
    """The status line arrived but reading the body failed."""


@runtime_checkable
class TransportResponse(Protocol):
    """What the dispatcher needs from a response."""

    @property
    def status_code(self) -> int: ...

    def read_text(self) -> str:
        """Read the full body as text. May raise `BodyReadFailed`."""

        ...

    def close(self) -> None:
        """Release the response without reading the body."""

        ...


@runtime_checkable
class HttpTransport(Protocol):
    """Minimal contract for sending one request.

    Design rules:
    - Synchronous: one blocking call per invocation.
    - Errors before a response is available are raised as `TransportError`.
    """

    def get(self, url: str) -> TransportResponse: ...

    def post(self, url: str, headers: Mapping[str, str], body: str) -> TransportResponse: ...
