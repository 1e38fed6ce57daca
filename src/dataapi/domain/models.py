"""Domain models for the disperser Data API metrics."""

from datetime import UTC, datetime
from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EjectionMode(str, Enum):
    """How an operator ejection was triggered."""

    PERIODIC = "periodic"
    URGENT = "urgent"


class RequestOutcome(str, Enum):
    """Outcome of a Data API request, as exported in the status label."""

    SUCCESS = "success"
    FAILED = "failed"
    NOT_FOUND = "not found"

    @classmethod
    def _missing_(cls, value: object) -> "RequestOutcome | None":
        # Accept the identifier spelling, e.g. "not_found"
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", " ")
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class BlobStatus(IntEnum):
    """Processing status of a blob in the metadata store."""

    PROCESSING = 0
    CONFIRMED = 1
    FAILED = 2
    FINALIZED = 3
    INSUFFICIENT_SIGNATURES = 4
    DISPERSING = 5

    def __str__(self) -> str:
        return _BLOB_STATUS_NAMES[self]


_BLOB_STATUS_NAMES = {
    BlobStatus.PROCESSING: "Processing",
    BlobStatus.CONFIRMED: "Confirmed",
    BlobStatus.FAILED: "Failed",
    BlobStatus.FINALIZED: "Finalized",
    BlobStatus.INSUFFICIENT_SIGNATURES: "InsufficientSignatures",
    BlobStatus.DISPERSING: "Dispersing",
}


class StatusCode(IntEnum):
    """gRPC status codes returned by the ejection endpoints."""

    OK = 0
    CANCELED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    def __str__(self) -> str:
        if self is StatusCode.OK:
            return "OK"
        return "".join(part.capitalize() for part in self.name.split("_"))

    @classmethod
    def label_for(cls, code: "StatusCode | int | str") -> str:
        """Render a status code the way it appears in metric labels.

        Known integers map to their code name, unknown integers render as
        ``Code(N)`` and strings are used verbatim.
        """
        if isinstance(code, str):
            return code
        try:
            return str(cls(int(code)))
        except ValueError:
            return f"Code({int(code)})"


class ErrorCode(str, Enum):
    """Standardized error codes."""

    CONFIGURATION_ERROR = "configuration_error"
    REGISTRATION_ERROR = "registration_error"
    BLOB_STORE_ERROR = "blob_store_error"
    INTERNAL_ERROR = "internal_error"


class BlobMetadata(BaseModel):
    """Metadata record for a dispersed blob."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )

    blob_key: str = Field(min_length=1)
    status: BlobStatus = BlobStatus.PROCESSING
    size_bytes: int = Field(default=0, ge=0)
    requested_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    metadata: dict[str, Any] = Field(default_factory=dict)

    def update_status(self, status: BlobStatus) -> None:
        """Move the blob to a new status."""
        self.status = status
        self.updated_at = datetime.now(UTC)
