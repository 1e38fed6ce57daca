"""Structured logging configuration and utilities."""

from .config import (
    LogFormat,
    LogLevel,
    get_logger,
    setup_logging,
    setup_testing_logging,
)
from .formatters import ConsoleFormatter, JSONFormatter, StructuredFormatter

__all__ = [
    "setup_logging",
    "setup_testing_logging",
    "LogLevel",
    "LogFormat",
    "get_logger",
    "JSONFormatter",
    "ConsoleFormatter",
    "StructuredFormatter",
]
