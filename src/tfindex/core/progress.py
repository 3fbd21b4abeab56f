"""Terminal feedback for the CLI: per-file progress and status lines.

Everything goes to stderr; stdout carries only the JSON index. While a
progress bar is live, console log handlers are muted and file outputs
keep receiving records.

Usage::

    from tfindex.core.progress import status, track_files

    for path in track_files(paths):
        index_one(path)

    status("2 files could not be parsed", style="warning")
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

import structlog
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

log = structlog.get_logger(__name__)

# Smaller batches finish before a bar is worth drawing.
_BAR_THRESHOLD = 100

_console = Console(stderr=True)

_PREFIXES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
}

_suppression = threading.local()


def is_console_suppressed() -> bool:
    return getattr(_suppression, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Mute console log handlers for the duration of the block."""
    previous = is_console_suppressed()
    _suppression.active = True
    try:
        yield
    finally:
        _suppression.active = previous


def status(message: str, *, style: str = "info") -> None:
    """Print one styled line to stderr."""
    _console.print(f"{_PREFIXES.get(style, '')}{message}", highlight=False)
    log.debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 file" / "3 files" style counts."""
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"


def track_files(
    paths: Sequence[str],
    *,
    desc: str = "Indexing",
    force: bool = False,
) -> Iterator[str]:
    """Yield ``paths`` in order, with a bar on a terminal for large batches."""
    total = len(paths)
    if not _console.is_terminal or not (force or total > _BAR_THRESHOLD):
        log.debug("files.start", desc=desc, total=total)
        yield from paths
        log.debug("files.done", desc=desc, total=total)
        return

    columns = (
        TextColumn("    {task.description}:"),
        BarColumn(bar_width=25, style="cyan", complete_style="cyan"),
        MofNCompleteColumn(),
        TextColumn("{task.fields[path]}", style="dim"),
    )
    with suppress_console_logs(), Progress(*columns, console=_console, transient=True) as bar:
        task_id = bar.add_task(desc, total=total, path="")
        for path in paths:
            bar.update(task_id, path=path)
            yield path
            bar.advance(task_id)
