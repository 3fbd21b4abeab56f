"""Core module exports."""

from tfindex.core.errors import (
    ConfigError,
    ErrorCode,
    HclSyntaxError,
    HilSyntaxError,
    SourceReadError,
    TfIndexError,
)
from tfindex.core.logging import configure_logging, get_logger
from tfindex.core.progress import pluralize, status, track_files

__all__ = [
    # Errors
    "TfIndexError",
    "ConfigError",
    "ErrorCode",
    "HclSyntaxError",
    "HilSyntaxError",
    "SourceReadError",
    # Logging
    "configure_logging",
    "get_logger",
    # Progress
    "pluralize",
    "track_files",
    "status",
]
