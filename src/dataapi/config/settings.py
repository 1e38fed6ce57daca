"""
Configuration management for the Data API metrics subsystem.

Settings are read from the environment (and an optional ``.env`` file) with
pydantic-settings. The metrics exporter only consumes plain values from
here: the HTTP port and the enable flag, plus a few presentation knobs.
"""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.exceptions import MetricsConfigurationError
from ..observability.logging.config import LogFormat, LogLevel

DEFAULT_NAMESPACE = "eigenda_dataapi"


class MetricsSettings(BaseSettings):
    """Metrics exporter configuration."""

    model_config = SettingsConfigDict(
        env_prefix="METRICS_", env_file=".env", extra="ignore"
    )

    enable_metrics: bool = True
    http_port: int = 9100
    host: str = "0.0.0.0"
    path: str = "/metrics"
    namespace: str = DEFAULT_NAMESPACE
    include_runtime_collectors: bool = True

    @field_validator("http_port")
    @classmethod
    def validate_http_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError("HTTP port must be between 1 and 65535")
        return v

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("Metrics path must start with '/'")
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_", env_file=".env", extra="ignore"
    )

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str | None = None


class BlobStoreSettings(BaseSettings):
    """Blob metadata store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BLOBSTORE_", env_file=".env", extra="ignore"
    )

    # Empty table name selects the in-memory store
    table_name: str = ""
    status_index: str = "StatusIndex"
    region: str = "us-east-1"
    endpoint_url: str | None = None

    @property
    def use_dynamodb(self) -> bool:
        """Whether a DynamoDB table is configured."""
        return bool(self.table_name)


class ApplicationSettings(BaseSettings):
    """Top-level settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    metrics: MetricsSettings = Field(default_factory=MetricsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    blob_store: BlobStoreSettings = Field(default_factory=BlobStoreSettings)


def get_settings() -> ApplicationSettings:
    """Load settings from the environment.

    Raises:
        MetricsConfigurationError: if any value fails validation. The caller
            decides whether to run without metrics.
    """
    try:
        return ApplicationSettings()
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise MetricsConfigurationError(
            f"Invalid configuration: {first.get('msg')}",
            field=field or "unknown",
            value=first.get("input"),
        ) from e

