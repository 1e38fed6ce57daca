"""Exception hierarchy for the Data API metrics subsystem."""

from typing import Any

from .models import ErrorCode


class DataAPIException(Exception):
    """Base exception for the Data API metrics subsystem."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class MetricsConfigurationError(DataAPIException):
    """Invalid metrics configuration."""

    def __init__(self, message: str, field: str, value: Any):
        super().__init__(
            message,
            ErrorCode.CONFIGURATION_ERROR,
            {"field": field, "value": str(value)},
        )


class MetricRegistrationError(DataAPIException):
    """A collector declared metric names that are already registered."""

    def __init__(self, collector: Any, names: list[str] | None = None):
        names = names or []
        super().__init__(
            f"Cannot register collector {collector!r}: duplicated metric names {names}",
            ErrorCode.REGISTRATION_ERROR,
            {"collector": repr(collector), "names": names},
        )
        self.names = names


class BlobStoreError(DataAPIException):
    """Blob metadata store query failure."""

    def __init__(self, message: str, operation: str, is_retryable: bool = True):
        super().__init__(
            message,
            ErrorCode.BLOB_STORE_ERROR,
            {"operation": operation, "is_retryable": is_retryable},
        )
        self.is_retryable = is_retryable
