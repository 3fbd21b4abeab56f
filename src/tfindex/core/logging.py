"""Structured logging for terraform-index.

structlog events are rendered by stdlib handlers, one per configured
output (stderr, stdout or an absolute file path), each with its own
level and renderer. Structural warnings raised while indexing, such as
skipped blocks and references that cannot be attributed, are reported
here and never reach the index.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from tfindex.config.models import LoggingConfig, LogOutputConfig

_CONSOLE_DESTINATIONS = frozenset({"stderr", "stdout"})

_log_file_path: Path | None = None


def get_log_file_path() -> Path | None:
    """First file destination of the active configuration, if any."""
    return _log_file_path


class ConsoleSuppressingFilter(logging.Filter):
    """Drop records while a live progress display owns the terminal."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        # Late import: progress logs through this module.
        from tfindex.core.progress import is_console_suppressed

        return not is_console_suppressed()


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Install handlers for every output in ``config``.

    Without a config, a single stderr output is built from ``json_format``
    and ``level``. Calling this again replaces the previous handlers.
    """
    global _log_file_path
    from tfindex.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level.upper(),  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level)
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Loggers bound at import time must see later reconfiguration.
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()
    root.setLevel(root_level)

    _log_file_path = None
    for output in config.outputs:
        handler = _build_handler(output)
        handler.setLevel(_level(output.level or config.level))
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=_build_renderer(output),
                foreign_pre_chain=pre_chain,
            )
        )
        root.addHandler(handler)
        if _log_file_path is None and output.destination not in _CONSOLE_DESTINATIONS:
            _log_file_path = Path(output.destination)


def _level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _build_handler(output: LogOutputConfig) -> logging.Handler:
    if output.destination in _CONSOLE_DESTINATIONS:
        handler: logging.Handler = logging.StreamHandler(getattr(sys, output.destination))
        handler.addFilter(ConsoleSuppressingFilter())
        return handler

    path = Path(output.destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a")


def _build_renderer(output: LogOutputConfig) -> structlog.types.Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()

    stream = getattr(sys, output.destination, None)
    return structlog.dev.ConsoleRenderer(
        colors=stream is not None and stream.isatty(),
        pad_event_to=0,
        pad_level=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]


def install_library_defaults() -> None:
    """Send events to stdlib logging until ``configure_logging`` runs.

    structlog's built-in default prints to stdout, the channel the index is
    written to. Through stdlib, an application that never configures
    logging gets warnings on stderr and nothing else.
    """
    if structlog.is_configured():
        return
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


install_library_defaults()
