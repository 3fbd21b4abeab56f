"""Config module exports."""

from tfindex.config.loader import TfIndexSettings, load_config
from tfindex.config.models import (
    IndexConfig,
    LoggingConfig,
    LogOutputConfig,
    TfIndexConfig,
)

__all__ = [
    "load_config",
    "TfIndexConfig",
    "TfIndexSettings",
    "IndexConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
