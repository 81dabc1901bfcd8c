"""URL pre-validation.

Why a pre-check before `urllib.parse`:
- The parser is lenient about numeric hosts and only complains about ports
  lazily, so out-of-range IP literals and ports are caught here with a
  specific message instead of a generic "bad protocol".
- Each check is a separate predicate so its accept/reject boundary can be
  tested on its own.

The checks are intentionally narrow: a host with four dot-separated parts is
only flagged when a part is a number above 255, never for being non-numeric.
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from tinycurl.core.domain.models import UrlValidationError, ValidatedUrl, ValidationErrorKind

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")

_IPV6_MAX_SEGMENTS = 8
_IPV6_MAX_SEGMENT_LENGTH = 4
_IPV4_OCTETS = 4
_IPV4_MAX_OCTET = 255
_MAX_PORT = 65535

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _parse_unsigned(text: str) -> int | None:
    """Decimal digits with an optional leading '+', or None."""

    digits = text[1:] if text.startswith("+") else text
    if digits and digits.isascii() and digits.isdigit():
        return int(digits)
    return None


def extract_authority(raw: str) -> str | None:
    """Text after the first `://` up to the next `/`, or None without `://`."""

    _, sep, rest = raw.partition("://")
    if not sep:
        return None
    return rest.split("/", 1)[0]


def bracketed_literal(authority: str) -> str | None:
    """Contents of `[...]` when the authority is an IPv6 literal."""

    if not authority.startswith("[") or "]" not in authority:
        return None
    return authority.split("[")[1].split("]")[0]


def check_ipv6_literal(literal: str) -> bool:
    """Segment-level sanity check of an IPv6 literal (without brackets)."""

    compressed = "::" in literal
    if literal.count("::") > 1:
        return False

    segments = literal.split(":")
    if len(segments) > _IPV6_MAX_SEGMENTS:
        return False

    for segment in segments:
        if not segment:
            # A single "::" legitimately leaves empty segments behind.
            if not compressed:
                return False
            continue
        if len(segment) > _IPV6_MAX_SEGMENT_LENGTH:
            return False
        if not all(ch in _HEX_DIGITS for ch in segment):
            return False
    return True


def check_ipv4_literal(authority: str) -> bool:
    """False only when the host has four parts and one is a number above 255."""

    candidate = authority.split(":")[0]
    parts = candidate.split(".")
    if len(parts) != _IPV4_OCTETS:
        return True
    for part in parts:
        value = _parse_unsigned(part)
        if value is not None and value > _IPV4_MAX_OCTET:
            return False
    return True


def check_port(authority: str) -> bool:
    """False only when the port field is a number above 65535."""

    fields = authority.split(":")
    if len(fields) < 2:
        return True
    value = _parse_unsigned(fields[1])
    return value is None or value <= _MAX_PORT


def _reject(raw: str, kind: ValidationErrorKind) -> UrlValidationError:
    logger.debug("url rejected (%s): %s", kind.value, raw)
    return UrlValidationError(kind=kind, url=raw)


def validate_url(raw: str) -> ValidatedUrl | UrlValidationError:
    """Validate `raw`, short-circuiting on the first failed check."""

    authority = extract_authority(raw)
    if authority is not None:
        literal = bracketed_literal(authority)
        if literal is not None and not check_ipv6_literal(literal):
            return _reject(raw, ValidationErrorKind.IPV6)
        if not check_ipv4_literal(authority):
            return _reject(raw, ValidationErrorKind.IPV4)
        if not check_port(authority):
            return _reject(raw, ValidationErrorKind.PORT)

    try:
        parts = urlsplit(raw)
        host = parts.hostname
        port = parts.port
    except ValueError:
        return _reject(raw, ValidationErrorKind.PROTOCOL)

    if parts.scheme not in ALLOWED_SCHEMES or not host:
        return _reject(raw, ValidationErrorKind.PROTOCOL)

    return ValidatedUrl(raw=raw, scheme=parts.scheme, host=host, port=port, path=parts.path)
