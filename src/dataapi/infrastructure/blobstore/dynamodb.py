"""DynamoDB-backed blob metadata store (read path used by metrics)."""

from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from dataapi.domain.exceptions import BlobStoreError
from dataapi.domain.models import BlobStatus
from dataapi.observability.logging import get_logger

logger = get_logger(__name__)


class DynamoDBBlobMetadataStore:
    """Counts blob metadata items by status through a status index.

    The table is expected to carry a global secondary index (``StatusIndex``
    by default) keyed by the numeric ``BlobStatus`` attribute.
    """

    def __init__(
        self,
        table_name: str,
        status_index: str = "StatusIndex",
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        client: Any = None,
    ):
        self.table_name = table_name
        self.status_index = status_index
        self.region = region

        if client is None:
            client = boto3.client(
                "dynamodb",
                region_name=region,
                endpoint_url=endpoint_url,
                config=Config(
                    retries={"max_attempts": 3, "mode": "adaptive"},
                    region_name=region,
                ),
            )
        self._client = client

    def get_blob_metadata_count_by_status(self, status: BlobStatus) -> int:
        """Return the number of blobs currently in ``status``.

        Uses a COUNT query and follows pagination; DynamoDB stops each page
        at 1MB of evaluated items.
        """
        query_params: dict[str, Any] = {
            "TableName": self.table_name,
            "IndexName": self.status_index,
            "KeyConditionExpression": "BlobStatus = :status",
            "ExpressionAttributeValues": {":status": {"N": str(int(status))}},
            "Select": "COUNT",
        }

        count = 0
        try:
            paginator = self._client.get_paginator("query")
            for page in paginator.paginate(**query_params):
                count += int(page.get("Count", 0))
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            raise BlobStoreError(
                f"Failed to count blobs with status {status}: {error_code}",
                operation="get_blob_metadata_count_by_status",
                is_retryable=error_code
                in ("ProvisionedThroughputExceededException", "ThrottlingException"),
            ) from e
        except BotoCoreError as e:
            raise BlobStoreError(
                f"Failed to count blobs with status {status}: {e}",
                operation="get_blob_metadata_count_by_status",
            ) from e

        logger.debug(
            "Counted blob metadata by status",
            table=self.table_name,
            status=str(status),
            count=count,
        )
        return count
