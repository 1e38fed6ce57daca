"""Live collectors: metrics computed from external state at scrape time.

A live collector is not updated when events happen. The registry calls
``describe()`` once at registration, then ``collect()`` on every scrape,
which runs one fresh query. When the query fails the failure is logged
and the metric is left out of that scrape; nothing is cached.
"""

from abc import abstractmethod
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from prometheus_client.core import GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from ...domain.models import BlobStatus
from ..logging import get_logger

if TYPE_CHECKING:
    from ...infrastructure.blobstore.base import BlobMetadataStore


class LiveSampleCollector(Collector):
    """Base class for gauges sampled from an external source on demand.

    Subclasses provide the metric shape and ``sample()``; this class owns
    the failure policy.
    """

    name: str
    documentation: str
    labelnames: Sequence[str] = ()

    def __init__(self) -> None:
        self.logger = get_logger(__name__).bind(component=type(self).__name__)

    @abstractmethod
    def label_values(self) -> Sequence[str]:
        """Label values for the emitted sample."""

    @abstractmethod
    def sample(self) -> float:
        """Query the external source. May raise."""

    def describe(self) -> Iterable[Metric]:
        return [GaugeMetricFamily(self.name, self.documentation, labels=self.labelnames)]

    def collect(self) -> Iterable[Metric]:
        try:
            value = self.sample()
        except Exception as e:
            self.logger.error(
                "Failed to sample live metric", metric=self.name, error=str(e)
            )
            return []

        family = GaugeMetricFamily(self.name, self.documentation, labels=self.labelnames)
        family.add_metric(list(self.label_values()), float(value))
        return [family]


class BlobStatusCollector(LiveSampleCollector):
    """Number of blobs in one status, read from the blob metadata store."""

    name = "dynamodb_blob_metadata_status_count"
    documentation = "Number of blobs with specific status in DynamoDB"
    labelnames = ("status",)

    def __init__(
        self,
        blob_metadata_store: "BlobMetadataStore",
        status: BlobStatus = BlobStatus.PROCESSING,
    ):
        super().__init__()
        self.blob_metadata_store = blob_metadata_store
        self.status = status

    def label_values(self) -> Sequence[str]:
        return [str(self.status)]

    def sample(self) -> float:
        count = self.blob_metadata_store.get_blob_metadata_count_by_status(self.status)
        if count < 0:
            raise ValueError(f"Negative blob count {count} for status {self.status}")
        return float(count)

    def __repr__(self) -> str:
        return f"BlobStatusCollector(status={self.status})"
