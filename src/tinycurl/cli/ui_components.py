"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from presentation details.
- Unstyled lines (echoed URL, payloads, response bodies) are written straight
  to the console's file. Rich's text pipeline expands tabs and drops control
  characters such as carriage returns, so it is only used for the styled lines.
"""

from __future__ import annotations

from rich.console import Console

ERROR_STYLE = "bold red"
HEADER_STYLE = "bold"


def build_console(*, stderr: bool = False) -> Console:
    return Console(
        stderr=stderr,
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )


def print_line(console: Console, text: str, *, style: str | None = None) -> None:
    if style is None:
        stream = console.file
        stream.write(text + "\n")
        stream.flush()
        return
    console.out(text, style=style, highlight=False)


def print_output_line(console: Console, text: str) -> None:
    """Print one pipeline line, emphasizing the response header lines."""

    style = HEADER_STYLE if text.startswith("Response body") else None
    print_line(console, text, style=style)


def print_error(console: Console, text: str) -> None:
    print_line(console, text, style=ERROR_STYLE)
