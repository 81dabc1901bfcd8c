"""Logging setup.

Diagnostics go to stderr through Rich so stdout only ever carries the
request/response lines. Calling `configure_logging` again replaces the
previous configuration instead of stacking handlers.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "tinycurl"
HTTPX_LOGGER_NAME = "httpx"

_HANDLER_MARK = "_tinycurl_handler"


def _rich_handler() -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    setattr(handler, _HANDLER_MARK, True)
    return handler


def _owned_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _HANDLER_MARK, False)]


def _attach(logger: logging.Logger, level: int) -> None:
    logger.setLevel(level)
    logger.propagate = False
    owned = _owned_handlers(logger)
    if owned:
        owned[0].setLevel(level)
        return
    handler = _rich_handler()
    handler.setLevel(level)
    logger.addHandler(handler)


def _detach(logger: logging.Logger) -> None:
    for handler in _owned_handlers(logger):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def configure_logging(level: str | int = logging.WARNING, *, verbose: bool = False) -> logging.Logger:
    """Configure the `tinycurl` logger, plus `httpx` request lines when verbose."""

    resolved = logging.DEBUG if verbose else level
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())

    logger = logging.getLogger(LOGGER_NAME)
    _attach(logger, resolved)

    httpx_logger = logging.getLogger(HTTPX_LOGGER_NAME)
    if verbose:
        # httpx logs each request line at INFO.
        _attach(httpx_logger, logging.INFO)
    else:
        _detach(httpx_logger)
    return logger
