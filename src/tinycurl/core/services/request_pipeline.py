"""Request orchestration.

The CLI delegates the whole validate → dispatch → format flow to `execute`,
which keeps side-effects (printing, styling) out of the core. Output lines
are handed to optional hooks as soon as they are known, so the lines printed
before a fatal `InvalidJsonPayload` still reach the user.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from tinycurl.core.domain.models import (
    FormBody,
    JsonBody,
    RequestOutcome,
    RequestSpec,
    Success,
    UrlValidationError,
)
from tinycurl.core.interfaces.transport import HttpTransport
from tinycurl.core.services.dispatcher import RequestDispatcher
from tinycurl.core.services.formatter import format_body, is_json
from tinycurl.core.services.url_validator import validate_url


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers."""

    line: Callable[[str], None] | None = None
    error: Callable[[str], None] | None = None


@dataclass
class PipelineResult:
    """Output of a pipeline invocation."""

    spec: RequestSpec
    lines: list[str] = field(default_factory=list)
    validation_error: UrlValidationError | None = None
    outcome: RequestOutcome | None = None

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, Success)


def render_outcome(outcome: RequestOutcome) -> list[str]:
    """Lines shown for a dispatch outcome."""

    if isinstance(outcome, Success):
        if is_json(outcome.body):
            return ["Response body (JSON with sorted keys):", format_body(outcome.body)]
        return ["Response body:", outcome.body]
    return [f"Error: {outcome.message}"]


def execute(
    spec: RequestSpec,
    *,
    transport: HttpTransport,
    hooks: PipelineHooks | None = None,
) -> PipelineResult:
    """Run one request end to end.

    Raises `InvalidJsonPayload` for a malformed `--json` payload; every other
    failure ends up as an `Error: ...` line in the result.
    """

    hooks = hooks or PipelineHooks()
    result = PipelineResult(spec=spec)

    def emit(text: str) -> None:
        result.lines.append(text)
        if hooks.line:
            hooks.line(text)

    def emit_error(message: str) -> None:
        text = f"Error: {message}"
        result.lines.append(text)
        callback = hooks.error or hooks.line
        if callback:
            callback(text)

    emit(f"Requesting URL: {spec.url}")
    emit(f"Method: {spec.method}")

    validated = validate_url(spec.url)
    if isinstance(validated, UrlValidationError):
        result.validation_error = validated
        emit_error(validated.message)
        return result

    if isinstance(spec.body, JsonBody):
        emit(f"JSON: {spec.body.raw}")
    elif isinstance(spec.body, FormBody):
        emit(f"Data: {spec.body.raw}")

    outcome = RequestDispatcher(transport).dispatch(spec, validated)
    result.outcome = outcome

    if isinstance(outcome, Success):
        for text in render_outcome(outcome):
            emit(text)
    else:
        emit_error(outcome.message)
    return result
