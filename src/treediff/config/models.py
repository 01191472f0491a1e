"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TREEDIFF__SECTION__KEY)
3. Repo YAML (nearest .treediff/config.yaml in the compared repository)
4. Global YAML (~/.config/treediff/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    TREEDIFF__<SECTION>__<KEY>=<VALUE>

Examples:
    TREEDIFF__LOGGING__LEVEL=DEBUG
    TREEDIFF__COMPARE__PATCH_MODE=deferred
    TREEDIFF__COMPARE__PATCH_WORKERS=4
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
PatchMode = Literal["eager", "deferred"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

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
        TREEDIFF__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG logs every traversed subtree.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CompareConfig(BaseModel):
    """Tree comparison configuration.

    Env vars:
        TREEDIFF__COMPARE__PATCH_MODE: eager or deferred patch computation
        TREEDIFF__COMPARE__PATCH_WORKERS: Threads for the deferred patch pass
        TREEDIFF__COMPARE__CONTEXT_LINES: Unified diff context lines
        TREEDIFF__COMPARE__MAX_DEPTH: Maximum subtree nesting depth
    """

    patch_mode: PatchMode = Field(
        default="eager",
        description="eager computes patches during the tree walk; deferred runs a "
        "second pass after all changed paths are known.",
    )
    patch_workers: int = Field(
        default=1,
        description="Worker threads for the deferred patch pass. Ignored in eager mode.",
    )
    context_lines: int = Field(
        default=3,
        description="Unchanged lines shown around each change.",
    )
    max_depth: int = Field(
        default=512,
        description="Abort when subtrees nest deeper than this. Guards untrusted trees.",
    )
    left_label: str = Field(default="left", description="Display name for the left side.")
    right_label: str = Field(default="right", description="Display name for the right side.")

    @field_validator("patch_workers", "max_depth")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Must be at least 1, got {v}")
        return v

    @field_validator("context_lines")
    @classmethod
    def validate_context_lines(cls, v: int) -> int:
        if not (0 <= v <= 100):
            raise ValueError(f"Context lines must be 0-100, got {v}")
        return v


class TreeDiffConfig(BaseModel):
    """Root configuration for treediff."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    compare: CompareConfig = Field(default_factory=CompareConfig)
