"""User-facing progress feedback for CLI operations.

Usage::

    from treediff.core.progress import spinner

    with spinner("Comparing trees"):
        report = compare_refs(...)
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console

from treediff.core.logging import suppress_console_logs

# Console for output
_console = Console(stderr=True)


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a spinner on stderr while the block runs.

    Non-TTY streams (CI, pipes, CliRunner) get no output at all.
    """
    if not _is_tty():
        yield
        return
    with (
        suppress_console_logs(),
        _console.status(f"[cyan]{message}[/cyan]", spinner="dots"),
    ):
        yield
