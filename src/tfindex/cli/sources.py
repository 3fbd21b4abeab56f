"""Resolving command-line paths to source contents."""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from tfindex.config.models import IndexConfig
from tfindex.core.errors import SourceReadError

log = structlog.get_logger(__name__)

STDIN = "-"

# Provider plugins and downloaded modules live here.
_SKIP_DIRS = frozenset({".terraform", ".git"})


def expand_paths(paths: tuple[str, ...] | list[str], config: IndexConfig) -> list[str]:
    """Expand directories to the source files beneath them.

    Files and ``-`` are kept as given, in order. Directory contents are
    sorted and filtered by extension and size.
    """
    expanded: list[str] = []
    for path in paths:
        if path != STDIN and Path(path).is_dir():
            expanded.extend(_walk_directory(Path(path), config))
        else:
            expanded.append(path)
    return expanded


def _walk_directory(root: Path, config: IndexConfig) -> list[str]:
    max_bytes = config.max_file_size_mb * 1024 * 1024
    found: list[str] = []
    for candidate in sorted(root.rglob("*")):
        relative = candidate.relative_to(root)
        if any(part in _SKIP_DIRS for part in relative.parts[:-1]):
            continue
        if not candidate.is_file() or candidate.suffix.lower() not in config.extensions:
            continue
        size = candidate.stat().st_size
        if size > max_bytes:
            log.warning("source.too_large", path=str(candidate), size=size, limit=max_bytes)
            continue
        found.append(str(candidate))
    return found


def read_source(path: str) -> bytes:
    """Read one source, ``-`` meaning stdin.

    Raises:
        SourceReadError: The path cannot be read.
    """
    if path == STDIN:
        with click.open_file(STDIN, "rb") as stream:
            return stream.read()
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise SourceReadError.unreadable(path, e.strerror or str(e)) from e
