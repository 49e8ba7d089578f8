"""Rich Console factory and theme for pqmctl output.

Result consoles render to a StringIO buffer so ``format_result()`` can
return a string. In non-TTY environments (tests, pipes) Rich drops color
codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PQM_THEME = Theme(
    {
        "pqm.ok": "bold green",
        "pqm.error": "bold red",
        "pqm.warning": "bold yellow",
        "pqm.op": "bold cyan",
        "pqm.key": "dim",
        "pqm.txid": "bold blue",
        "pqm.address": "magenta",
        "pqm.amount": "bold",
        "pqm.status.confirmed": "green",
        "pqm.status.submitted": "yellow",
        "pqm.status.excepted": "bold red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PQM_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def create_status_console() -> Console:
    """Console for transient progress on stderr, never on stdout."""
    return Console(stderr=True, theme=PQM_THEME, highlight=False)


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a transaction status."""
    return f"pqm.status.{status}" if status in ("confirmed", "submitted", "excepted") else ""
