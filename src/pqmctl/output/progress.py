"""Confirmation progress on stderr.

:func:`confirmation_spinner` is the progress factory handed to services:
it attaches itself as the tracker's ``on_update`` hook and shows a Rich
status line until the wait ends.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from pqmctl.output.console import create_status_console

if TYPE_CHECKING:
    from pqmctl.output.formatters import OutputSettings
    from pqmctl.services.base import ProgressFactory
    from pqmctl.services.confirmation import ConfirmationTracker


def progress_text(tracker: ConfirmationTracker) -> str:
    return (
        f"confirm {tracker.handle.method} "
        f"({tracker.confirmations}/{tracker.required}) {tracker.handle.txid[:16]}"
    )


@contextmanager
def confirmation_spinner(tracker: ConfirmationTracker) -> Iterator[None]:
    console = create_status_console()
    if not console.is_terminal:
        yield
        return

    with console.status(progress_text(tracker), spinner="dots") as status:
        tracker.on_update = lambda t: status.update(progress_text(t))
        try:
            yield
        finally:
            tracker.on_update = None


def progress_factory(settings: OutputSettings) -> ProgressFactory | None:
    """Pick the progress display for an output mode; None when it must stay silent."""
    if settings.json_output or settings.quiet:
        return None
    return confirmation_spinner

