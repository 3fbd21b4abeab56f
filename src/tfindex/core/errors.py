"""terraform-index error types with typed error codes.

Error code ranges:
- 2xxx: Settings (tool configuration, not Terraform sources)
- 3xxx: Source (Terraform files and interpolation expressions)

Source errors raised while indexing are turned into index ``Error``
entries by the collector; only settings and read errors reach the CLI.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    # Settings (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Source (3xxx)
    SOURCE_SYNTAX_ERROR = 3001
    EXPRESSION_SYNTAX_ERROR = 3002
    SOURCE_READ_ERROR = 3003


@dataclass(frozen=True, slots=True)
class TfIndexError(Exception):
    """Base error: a code, a human-readable message and structured details."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": int(self.code),
            "error": self.code.name,
            "message": self.message,
            "details": {key: str(value) for key, value in self.details.items()},
        }

    def __str__(self) -> str:
        return f"[{int(self.code)}] {self.code.name}: {self.message}"


class ConfigError(TfIndexError):
    """A config file or value was rejected."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Cannot read config {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class _PositionedError(TfIndexError):
    """Parser failure carrying the parser's own position type in ``pos``."""

    @property
    def pos(self) -> Any:
        return self.details.get("pos")


class HclSyntaxError(_PositionedError):
    """The configuration parser rejected its input (``pos``: ``hcl.Pos``)."""

    @classmethod
    def at(cls, message: str, pos: Any) -> "HclSyntaxError":
        return cls(code=ErrorCode.SOURCE_SYNTAX_ERROR, message=message, details={"pos": pos})


class HilSyntaxError(_PositionedError):
    """The interpolation parser rejected a template (``pos``: ``hil.Pos``)."""

    @classmethod
    def at(cls, message: str, pos: Any) -> "HilSyntaxError":
        return cls(code=ErrorCode.EXPRESSION_SYNTAX_ERROR, message=message, details={"pos": pos})


class SourceReadError(TfIndexError):
    """A source path could not be read."""

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "SourceReadError":
        return cls(
            code=ErrorCode.SOURCE_READ_ERROR,
            message=f"Cannot open path '{path}': {reason}",
            details={"path": path, "reason": reason},
        )
