"""Typer application.

The command only parses arguments, wires settings, logging and the httpx
transport, and prints. The request flow itself lives in
`tinycurl.core.services.request_pipeline`.
"""

from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from tinycurl.adapters.http_client import HttpxTransport
from tinycurl.cli.ui_components import build_console, print_error, print_line, print_output_line
from tinycurl.core.config import AppSettings
from tinycurl.core.domain.models import InvalidJsonPayload, RequestSpec
from tinycurl.core.logging_config import configure_logging
from tinycurl.core.services.request_pipeline import PipelineHooks, execute

# Distinct from Typer's usage error status (2) and from ordinary request failures (0).
FATAL_EXIT_CODE = 101
CONFIG_EXIT_CODE = 2

app = typer.Typer(
    add_completion=False,
    help="A simple HTTP client: one GET or POST, JSON responses pretty-printed.",
)


def make_transport(settings: AppSettings) -> HttpxTransport:
    return HttpxTransport(settings)


def _load_settings(err_console: Console) -> AppSettings:
    try:
        return AppSettings()
    except ValidationError as exc:
        print_error(err_console, f"Invalid configuration: {exc}")
        raise typer.Exit(code=CONFIG_EXIT_CODE) from exc


@app.command()
def request(
    url: Annotated[str, typer.Argument(help="URL to request.", show_default=False)],
    method: Annotated[str, typer.Option("-X", help="HTTP method (GET or POST).")] = "GET",
    data: Annotated[
        Optional[str],
        typer.Option("-d", help="Data to send in a POST request (form data: key1=value1&key2=value2)."),
    ] = None,
    json_data: Annotated[
        Optional[str],
        typer.Option("--json", help="JSON data for a POST request (sets the method to POST)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log request details to stderr."),
    ] = False,
) -> None:
    """Send one request to URL and print the response body."""

    console = build_console()
    err_console = build_console(stderr=True)

    settings = _load_settings(err_console)
    configure_logging(settings.log_level, verbose=verbose)

    spec = RequestSpec.from_cli(url, method=method, data=data, json_data=json_data)
    hooks = PipelineHooks(
        line=lambda text: print_output_line(console, text),
        error=lambda text: print_error(console, text),
    )

    try:
        with make_transport(settings) as transport:
            execute(spec, transport=transport, hooks=hooks)
    except InvalidJsonPayload as exc:
        print_line(err_console, str(exc), style="red")
        raise typer.Exit(code=FATAL_EXIT_CODE) from exc


def run() -> None:
    app()
