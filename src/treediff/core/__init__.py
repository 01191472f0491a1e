"""Core module exports."""

from treediff.core.errors import ConfigError, ErrorCode, TreeDiffError
from treediff.core.logging import configure_logging, get_logger
from treediff.core.progress import spinner

__all__ = [
    # Errors
    "ErrorCode",
    "TreeDiffError",
    "ConfigError",
    # Logging
    "configure_logging",
    "get_logger",
    # Progress
    "spinner",
]
