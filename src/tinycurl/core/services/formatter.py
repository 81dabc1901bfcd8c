"""Response body formatting.

JSON bodies are re-rendered with sorted keys and a 2-space indent so the
output is stable across runs. Anything else is returned untouched.
"""

from __future__ import annotations

import json
from typing import Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def parse_json(text: str) -> Any:
    """Strict `json.loads`: `NaN`/`Infinity` are not JSON."""

    return json.loads(text, parse_constant=_reject_constant)


def is_json(text: str) -> bool:
    try:
        parse_json(text)
    except (ValueError, RecursionError):
        return False
    return True


def format_body(body: str) -> str:
    """Pretty-print `body` when it is JSON, otherwise return it unchanged."""

    try:
        value = parse_json(body)
    except (ValueError, RecursionError):
        return body
    return json.dumps(value, ensure_ascii=False, indent=2, sort_keys=True)
