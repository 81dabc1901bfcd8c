"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without coupling the
  core to I/O libraries.
- Frozen models give us immutable values that can be compared in tests.

Note:
- These models describe *what* a request and its outcome are, not *how* the
  request is sent.
- Failures are tagged values (`kind`), not exceptions: the orchestrator
  renders them, it never has to catch them.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class HttpMethod(str, Enum):
    """Methods the dispatcher knows how to send."""

    GET = "GET"
    POST = "POST"


class FormBody(BaseModel):
    """Raw `-d` payload, sent as-is unless it looks like a JSON object."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["form"] = "form"
    raw: str = Field(..., description="Payload exactly as typed by the user.")


class JsonBody(BaseModel):
    """Raw `--json` payload, validated eagerly before sending."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["json"] = "json"
    raw: str = Field(..., description="Payload exactly as typed by the user.")


RequestBody = Annotated[Union[FormBody, JsonBody], Field(discriminator="kind")]


class RequestSpec(BaseModel):
    """The single request described by the user's input.

    Invariant: `method` is POST whenever `body` is set.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Target URL exactly as given.")
    method: str = Field(
        default=HttpMethod.GET.value,
        description="Resolved method. Unsupported strings are kept so dispatch can reject them.",
    )
    body: RequestBody | None = Field(default=None)

    @classmethod
    def from_cli(
        cls,
        url: str,
        *,
        method: str = HttpMethod.GET.value,
        data: str | None = None,
        json_data: str | None = None,
    ) -> "RequestSpec":
        """Build the request from raw CLI values.

        A JSON payload overrides the requested method. A data payload only
        survives when the method is POST.
        """

        if json_data is not None:
            return cls(url=url, method=HttpMethod.POST.value, body=JsonBody(raw=json_data))
        if data is not None and method == HttpMethod.POST.value:
            return cls(url=url, method=method, body=FormBody(raw=data))
        return cls(url=url, method=method)


class ValidatedUrl(BaseModel):
    """A URL accepted by `validate_url`. Only the validator builds these."""

    model_config = ConfigDict(frozen=True)

    raw: str = Field(..., description="Original URL string, sent unchanged.")
    scheme: Literal["http", "https"]
    host: str = Field(..., min_length=1)
    port: int | None = Field(default=None, ge=0, le=65535)
    path: str = Field(default="")


class ValidationErrorKind(str, Enum):
    IPV6 = "ipv6"
    IPV4 = "ipv4"
    PORT = "port"
    PROTOCOL = "protocol"


_VALIDATION_MESSAGES: dict[ValidationErrorKind, str] = {
    ValidationErrorKind.IPV6: "The URL contains an invalid IPv6 address.",
    ValidationErrorKind.IPV4: "The URL contains an invalid IPv4 address.",
    ValidationErrorKind.PORT: "The URL contains an invalid port number.",
    ValidationErrorKind.PROTOCOL: "The URL does not have a valid base protocol.",
}


class UrlValidationError(BaseModel):
    """Why a URL was rejected. The taxonomy is flat."""

    model_config = ConfigDict(frozen=True)

    kind: ValidationErrorKind
    url: str

    @property
    def message(self) -> str:
        return _VALIDATION_MESSAGES[self.kind]


class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: Literal["success"] = "success"
    body: str = Field(..., description="Full response body decoded as text.")


class TransportErrorKind(str, Enum):
    CONNECT = "connect"
    OTHER = "other"
    BODY = "body"


CONNECT_FAILURE_MESSAGE = (
    "Unable to connect to the server. Perhaps the network is offline "
    "or the server hostname cannot be resolved."
)


class TransportFailure(BaseModel):
    """No usable response: connect failure, other transport error, or body read failure."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal["transport_failure"] = "transport_failure"
    kind: TransportErrorKind
    message: str = Field(..., min_length=1)


class HttpFailure(BaseModel):
    """A response arrived with a non-2xx status. The body is discarded."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal["http_failure"] = "http_failure"
    status: int = Field(..., ge=100, le=999)

    @property
    def message(self) -> str:
        return f"Request failed with status code: {self.status}"


class RejectionKind(str, Enum):
    MISSING_DATA = "missing_data"
    UNSUPPORTED_METHOD = "unsupported_method"
    INVALID_JSON_DATA = "invalid_json_data"


class RequestRejected(BaseModel):
    """The request was refused before touching the network."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal["rejected"] = "rejected"
    kind: RejectionKind
    message: str = Field(..., min_length=1)

    @classmethod
    def missing_data(cls) -> "RequestRejected":
        return cls(kind=RejectionKind.MISSING_DATA, message="No data provided for POST request.")

    @classmethod
    def unsupported_method(cls) -> "RequestRejected":
        return cls(kind=RejectionKind.UNSUPPORTED_METHOD, message="Unsupported HTTP method.")

    @classmethod
    def invalid_json_data(cls, detail: str) -> "RequestRejected":
        return cls(kind=RejectionKind.INVALID_JSON_DATA, message=f"Invalid JSON data: {detail}")


RequestOutcome = Annotated[
    Union[Success, TransportFailure, HttpFailure, RequestRejected],
    Field(discriminator="outcome"),
]


class InvalidJsonPayload(ValueError):
    """A `--json` payload that does not parse. Unlike every other failure,
    this one is fatal and is allowed to end the process."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid JSON: {detail}")
