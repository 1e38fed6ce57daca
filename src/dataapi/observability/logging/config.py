"""Logging configuration and setup."""

import logging
import sys
from collections.abc import Callable
from enum import Enum
from typing import Any

import structlog
from structlog.stdlib import LoggerFactory

from .formatters import ConsoleFormatter, JSONFormatter, StructuredFormatter


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Logging formats."""

    JSON = "json"
    CONSOLE = "console"
    STRUCTURED = "structured"


# Library loggers that speak on every scrape or store query
_LIBRARY_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "botocore",
    "boto3",
    "urllib3",
)

_RENDERERS: dict[LogFormat, Callable[[bool], Any]] = {
    LogFormat.JSON: lambda colors: JSONFormatter(),
    LogFormat.CONSOLE: lambda colors: ConsoleFormatter(colors=colors),
    LogFormat.STRUCTURED: lambda colors: StructuredFormatter(),
}


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    format_type: LogFormat = LogFormat.JSON,
    log_file: str | None = None,
    enable_colors: bool = True,
    include_timestamps: bool = True,
) -> None:
    """Route structlog through the standard library with a single renderer.

    Handlers already on the root logger are replaced, so calling this again
    reconfigures cleanly. Library loggers are held at WARNING or above so
    the exporter's HTTP server and the AWS client stay quiet at DEBUG.
    """
    numeric_level = getattr(logging, LogLevel(level).value)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    root.addHandler(_build_handler(log_file))
    root.setLevel(numeric_level)

    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    renderer = _RENDERERS[LogFormat(format_type)](enable_colors)
    structlog.configure(
        processors=[*_shared_processors(include_timestamps), renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _build_handler(log_file: str | None) -> logging.Handler:
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _shared_processors(include_timestamps: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
    ]
    if include_timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    return processors


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    logger = structlog.get_logger(name)
    return logger  # type: ignore[no-any-return]


def setup_testing_logging() -> None:
    """Setup logging for the test suite."""
    setup_logging(
        level=LogLevel.WARNING,
        format_type=LogFormat.STRUCTURED,
        include_timestamps=False,
    )
