"""Configuration for the Data API metrics subsystem."""

from .settings import (
    ApplicationSettings,
    BlobStoreSettings,
    LoggingSettings,
    MetricsSettings,
    get_settings,
)

__all__ = [
    "ApplicationSettings",
    "BlobStoreSettings",
    "LoggingSettings",
    "MetricsSettings",
    "get_settings",
]
