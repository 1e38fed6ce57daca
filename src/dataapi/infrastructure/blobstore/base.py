"""
Blob metadata store interface.

The metrics subsystem only reads from the store, and only one thing: how
many blobs are currently in a given status.
"""

from typing import Protocol, runtime_checkable

from dataapi.domain.models import BlobStatus


@runtime_checkable
class BlobMetadataStore(Protocol):
    """Read interface the live metrics collector depends on."""

    def get_blob_metadata_count_by_status(self, status: BlobStatus) -> int:
        """Return the number of blobs currently in ``status``.

        Raises:
            BlobStoreError: if the backend query fails.
        """
        ...
