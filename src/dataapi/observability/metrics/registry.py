"""Metrics registry: metric store, live collectors and runtime collectors."""

from dataclasses import dataclass

from prometheus_client import (
    CollectorRegistry,
    GCCollector,
    PlatformCollector,
    ProcessCollector,
)
from prometheus_client.exposition import choose_encoder
from prometheus_client.registry import Collector

from ...domain.exceptions import MetricRegistrationError
from ..logging import get_logger
from .collectors import LiveSampleCollector
from .store import MetricStore

DEFAULT_NAMESPACE = "eigenda_dataapi"


@dataclass(frozen=True)
class ScrapeSnapshot:
    """One rendering of every registered series, produced per scrape."""

    body: bytes
    content_type: str

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")


class MetricsRegistry:
    """Explicitly owned registry for one process.

    Pass the instance to the exporter and to the call sites that record
    events; nothing here touches the prometheus_client default registry.
    """

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        include_runtime_collectors: bool = True,
    ):
        self.namespace = namespace
        self.registry = CollectorRegistry()
        self.logger = get_logger(__name__).bind(component="MetricsRegistry")
        self._collectors: list[Collector] = []

        if include_runtime_collectors:
            self._register_runtime_collectors()

        self.store = MetricStore(self.registry, namespace=namespace)
        self._collectors.extend(self.store.collectors)

    @property
    def live_collectors(self) -> list[LiveSampleCollector]:
        return [c for c in self._collectors if isinstance(c, LiveSampleCollector)]

    def register(self, collector: Collector) -> None:
        """Add a collector.

        Raises:
            MetricRegistrationError: a declared metric name is already taken.
                This is a programming error; the process should not start.
        """
        try:
            self.registry.register(collector)
        except ValueError as e:
            raise MetricRegistrationError(
                collector, self._conflicting_names(collector)
            ) from e

        self._collectors.append(collector)
        self.logger.debug("Registered metrics collector", collector=repr(collector))

    def unregister(self, collector: Collector) -> None:
        """Remove a previously registered collector."""
        self.registry.unregister(collector)
        self._collectors.remove(collector)

    def scrape(self, accept_header: str | None = None) -> ScrapeSnapshot:
        """Render all current values, static and live.

        OpenMetrics is used when the Accept header asks for it, the classic
        text format otherwise.
        """
        encoder, content_type = choose_encoder(accept_header or "")
        return ScrapeSnapshot(body=encoder(self.registry), content_type=content_type)

    def get_sample_value(
        self, name: str, labels: dict[str, str] | None = None
    ) -> float | None:
        """Current value of one sample, or None when it is absent."""
        return self.registry.get_sample_value(name, labels)

    def _register_runtime_collectors(self) -> None:
        # GCCollector registers itself and does not accept registry=None
        for factory in (ProcessCollector, PlatformCollector, GCCollector):
            try:
                collector = factory(registry=self.registry)
            except ValueError as e:
                raise MetricRegistrationError(factory.__name__, []) from e
            self._collectors.append(collector)

    def _conflicting_names(self, collector: Collector) -> list[str]:
        declared = _family_names(collector)
        taken: set[str] = set()
        for existing in self._collectors:
            taken.update(_family_names(existing))
        return sorted(declared & taken) or sorted(declared)


def _family_names(collector: Collector) -> set[str]:
    # Runtime collectors define no describe(); their collect() is local and cheap
    describe = getattr(collector, "describe", None)
    families = describe() if describe is not None else collector.collect()
    return {family.name for family in families}
