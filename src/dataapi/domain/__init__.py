"""Domain models and exceptions."""

from .exceptions import (
    BlobStoreError,
    DataAPIException,
    MetricRegistrationError,
    MetricsConfigurationError,
)
from .models import BlobStatus, EjectionMode, ErrorCode, RequestOutcome, StatusCode

__all__ = [
    "BlobStatus",
    "BlobStoreError",
    "DataAPIException",
    "EjectionMode",
    "ErrorCode",
    "MetricRegistrationError",
    "MetricsConfigurationError",
    "RequestOutcome",
    "StatusCode",
]
