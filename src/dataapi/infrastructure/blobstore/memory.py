"""
In-memory blob metadata store for development and testing.

Non-persistent storage in a dictionary with a status index, guarded by a
lock so writers and the scrape-time reader can run on different threads.
"""

import threading
from collections import Counter

from dataapi.domain.exceptions import BlobStoreError
from dataapi.domain.models import BlobMetadata, BlobStatus


class InMemoryBlobMetadataStore:
    """In-memory blob metadata storage.

    Records are copied on the way in and out; status changes go through
    ``update_blob_status`` so the status index stays in step.
    """

    def __init__(self) -> None:
        self._blobs: dict[str, BlobMetadata] = {}
        self._status_counts: Counter[BlobStatus] = Counter()
        self._lock = threading.Lock()

    def put_blob_metadata(self, metadata: BlobMetadata) -> BlobMetadata:
        """Insert a new blob record."""
        with self._lock:
            if metadata.blob_key in self._blobs:
                raise BlobStoreError(
                    f"Blob {metadata.blob_key} already exists",
                    operation="put_blob_metadata",
                    is_retryable=False,
                )
            self._blobs[metadata.blob_key] = metadata.model_copy(deep=True)
            self._status_counts[metadata.status] += 1
            return metadata.model_copy(deep=True)

    def get_blob_metadata(self, blob_key: str) -> BlobMetadata | None:
        """Get a copy of a blob record by key."""
        with self._lock:
            metadata = self._blobs.get(blob_key)
            return metadata.model_copy(deep=True) if metadata is not None else None

    def update_blob_status(self, blob_key: str, status: BlobStatus) -> BlobMetadata:
        """Move a blob to a new status."""
        with self._lock:
            metadata = self._blobs.get(blob_key)
            if metadata is None:
                raise BlobStoreError(
                    f"Blob {blob_key} not found",
                    operation="update_blob_status",
                    is_retryable=False,
                )
            self._status_counts[metadata.status] -= 1
            metadata.update_status(status)
            self._status_counts[status] += 1
            return metadata.model_copy(deep=True)

    def delete_blob_metadata(self, blob_key: str) -> bool:
        """Remove a blob record. Returns False when it did not exist."""
        with self._lock:
            metadata = self._blobs.pop(blob_key, None)
            if metadata is None:
                return False
            self._status_counts[metadata.status] -= 1
            return True

    def get_blob_metadata_count_by_status(self, status: BlobStatus) -> int:
        """Return the number of blobs currently in ``status``."""
        with self._lock:
            return self._status_counts[status]
