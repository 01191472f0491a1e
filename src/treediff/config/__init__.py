"""Config module exports."""

from treediff.config.loader import load_config
from treediff.config.models import (
    CompareConfig,
    LoggingConfig,
    LogOutputConfig,
    TreeDiffConfig,
)

__all__ = [
    "load_config",
    "TreeDiffConfig",
    "CompareConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
