"""Structured logging for treediff runs.

Each entry in ``LoggingConfig.outputs`` becomes one stdlib handler with a
structlog ``ProcessorFormatter``. Console outputs (stderr, stdout) are muted
while a spinner owns the terminal; file outputs always receive records.
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from treediff.config.models import LoggingConfig, LogOutputConfig

CONSOLE_DESTINATIONS = ("stderr", "stdout")

# Process-wide: patch worker threads log while the main thread runs the spinner
_console_muted = threading.Event()

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
]


def is_console_suppressed() -> bool:
    return _console_muted.is_set()


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Mute console handlers in every thread until the block exits."""
    _console_muted.set()
    try:
        yield
    finally:
        _console_muted.clear()


class ConsoleSuppressingFilter(logging.Filter):
    """Drops records while console logs are suppressed."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        return not _console_muted.is_set()


def _level(name: str) -> int:
    return logging.getLevelNamesMapping()[name.upper()]


def effective_logging_config(
    config: LoggingConfig | None = None,
    *,
    verbose: bool = False,
    json_format: bool = False,
    level: str = "WARNING",
) -> LoggingConfig:
    """Resolve the configuration ``configure_logging`` will apply.

    Without ``config`` a single stderr output is used. ``verbose`` raises the
    root level and every console output to DEBUG; file outputs with an
    explicit level keep it.
    """
    from treediff.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    if not verbose:
        return config

    outputs = [
        o.model_copy(update={"level": "DEBUG"}) if o.destination in CONSOLE_DESTINATIONS else o
        for o in config.outputs
    ]
    return config.model_copy(update={"level": "DEBUG", "outputs": outputs})


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    verbose: bool = False,
    json_format: bool = False,
    level: str = "WARNING",
) -> LoggingConfig:
    """Install structlog and one root handler per configured output.

    Calling it again replaces the previous handlers. Returns the configuration
    that was applied.
    """
    config = effective_logging_config(
        config, verbose=verbose, json_format=json_format, level=level
    )
    root_level = _level(config.level)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Not cached so a later configure_logging call takes effect
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)

    for output in config.outputs:
        handler = _handler_for(output)
        handler.setLevel(_level(output.level or config.level))
        root_logger.addHandler(handler)
    return config


def _handler_for(output: LogOutputConfig) -> logging.Handler:
    handler: logging.Handler
    if output.destination in CONSOLE_DESTINATIONS:
        stream = getattr(sys, output.destination)
        handler = logging.StreamHandler(stream)
        handler.addFilter(ConsoleSuppressingFilter())
        colors = stream.isatty()
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a")
        colors = False

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_SHARED_PROCESSORS)
    )
    return handler


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
