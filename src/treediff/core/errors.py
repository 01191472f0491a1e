"""treediff error types with typed error codes.

Error code ranges:
- 2xxx: Config

Repository and tree errors raised while comparing snapshots live in
``treediff.git.errors``.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from pydantic import ValidationError


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002


@dataclass(frozen=True, slots=True)
class TreeDiffError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(TreeDiffError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def from_validation_error(cls, error: ValidationError, section: str | None = None) -> "ConfigError":
        """Report the first failing field, dotted from the config root."""
        first = error.errors()[0]
        loc = [section] if section else []
        loc.extend(str(part) for part in first["loc"])
        return cls.invalid_value(".".join(loc), first.get("input"), first["msg"])
