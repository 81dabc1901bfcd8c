"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking them
  into the CLI.
- Lets adapters (the HTTP transport) read settings consistently.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "tinycurl"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "tinycurl"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "tinycurl"
    return Path.home() / ".config" / "tinycurl"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars) without polluting the core.
    - A single configuration contract for the CLI and the transport adapter.

    Timeouts are deliberately not exposed as CLI flags; override them with
    `TINYCURL_HTTP_TIMEOUT_SECONDS` and friends.
    """

    model_config = SettingsConfigDict(
        env_prefix="TINYCURL_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Overall read/write/pool timeout per request (seconds).",
    )
    connect_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for establishing the TCP/TLS connection (seconds).",
    )
    follow_redirects: bool = Field(
        default=True,
        description="Follow 3xx redirects like a browser would.",
    )
    max_redirects: int = Field(
        default=10,
        ge=0,
        le=50,
        description="Maximum number of redirects followed before giving up.",
    )
    user_agent: str = Field(
        default="tinycurl/0.1",
        min_length=1,
        description="User-Agent header sent with every request.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level for stderr diagnostics (DEBUG, INFO, WARNING, ...).",
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level
