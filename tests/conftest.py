"""Test configuration and fixtures."""

import os
from unittest.mock import MagicMock

import pytest

# Keep settings deterministic regardless of the developer's environment
os.environ.setdefault("METRICS_ENABLE_METRICS", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from dataapi.domain.exceptions import BlobStoreError  # noqa: E402
from dataapi.domain.models import BlobMetadata, BlobStatus  # noqa: E402
from dataapi.infrastructure.blobstore import InMemoryBlobMetadataStore  # noqa: E402
from dataapi.observability.metrics import (  # noqa: E402
    BlobStatusCollector,
    MetricsRegistry,
)

NAMESPACE = "eigenda_dataapi"


@pytest.fixture
def metrics():
    """Registry without runtime collectors, so scrapes only hold our series."""
    return MetricsRegistry(namespace=NAMESPACE, include_runtime_collectors=False)


@pytest.fixture
def store(metrics):
    """Metric store of the test registry."""
    return metrics.store


@pytest.fixture
def blob_store():
    """In-memory blob store holding three processing blobs and one confirmed."""
    blob_store = InMemoryBlobMetadataStore()
    for i in range(3):
        blob_store.put_blob_metadata(BlobMetadata(blob_key=f"blob-{i}"))
    blob_store.put_blob_metadata(
        BlobMetadata(blob_key="blob-confirmed", status=BlobStatus.CONFIRMED)
    )
    return blob_store


@pytest.fixture
def failing_blob_store():
    """Blob store whose count query always fails."""
    blob_store = MagicMock()
    blob_store.get_blob_metadata_count_by_status.side_effect = BlobStoreError(
        "connection reset", operation="get_blob_metadata_count_by_status"
    )
    return blob_store


@pytest.fixture
def live_metrics(metrics, blob_store):
    """Registry with the processing-blob collector attached."""
    metrics.register(BlobStatusCollector(blob_store, BlobStatus.PROCESSING))
    return metrics
