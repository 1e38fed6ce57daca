"""Blob metadata store adapters."""

from .base import BlobMetadataStore
from .dynamodb import DynamoDBBlobMetadataStore
from .memory import InMemoryBlobMetadataStore

__all__ = [
    "BlobMetadataStore",
    "DynamoDBBlobMetadataStore",
    "InMemoryBlobMetadataStore",
]
