"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TFINDEX__SECTION__KEY)
3. Project YAML (.tfindex.yaml)
4. Global YAML (~/.config/tfindex/config.yaml)
5. Built-in defaults (this file)

Examples:
    TFINDEX__LOGGING__LEVEL=DEBUG
    TFINDEX__INDEX__STRICT_REFERENCES=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TFINDEX__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. Structural warnings are emitted at WARNING.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IndexConfig(BaseModel):
    """Indexing behaviour.

    Env vars:
        TFINDEX__INDEX__INCLUDE_RAW_AST: Retain the parsed tree in the output
        TFINDEX__INDEX__STRICT_REFERENCES: Record unresolvable references as errors
        TFINDEX__INDEX__MAX_FILE_SIZE_MB: Skip files larger than this
    """

    include_raw_ast: bool = Field(
        default=False,
        description="Retain the raw syntax tree of the last processed file in the index.",
    )
    strict_references: bool = Field(
        default=False,
        description="Also record references with fewer than two dotted components "
        "(e.g. '${foo}') as index errors instead of only logging them.",
    )
    extensions: list[str] = Field(
        default_factory=lambda: [".tf"],
        description="File extensions picked up when a directory is given on the command line.",
    )
    max_file_size_mb: int = Field(
        default=10,
        description="Skip files larger than this (MB) during directory expansion.",
    )

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        if not normalized:
            raise ValueError("At least one extension is required")
        return normalized

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_max_file_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {v}")
        return v


class TfIndexConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
