"""Data API metric definitions and domain recording operations.

Counter families keep their historical names (``eigenda_dataapi_requests``,
``eigenda_dataapi_operators_to_eject`` and the ejection request counters), but
prometheus_client exposes counter samples with a ``_total`` suffix. Queries
and dashboards written against the unsuffixed sample names must select
``eigenda_dataapi_requests_total`` and so on.
"""

from collections.abc import Mapping

from prometheus_client import CollectorRegistry, Counter, Gauge
from prometheus_client.registry import Collector

from ...domain.models import EjectionMode, RequestOutcome, StatusCode
from ..logging import get_logger
from .summary import QuantileSummary

LATENCY_OBJECTIVES: dict[float, float] = {0.5: 0.05, 0.9: 0.01, 0.95: 0.01, 0.99: 0.001}


class MetricStore:
    """Counters, gauges and summaries of the Data API.

    All metrics are created once, at construction, on the given registry.
    Series are created lazily on first write and never removed. Every
    operation is safe to call concurrently and never raises for valid
    argument types: recording a metric must not fail the work it measures.
    """

    def __init__(self, registry: CollectorRegistry, namespace: str = "eigenda_dataapi"):
        self.namespace = namespace
        self.logger = get_logger(__name__).bind(component="DataAPIMetrics")

        self.num_requests = Counter(
            "requests",
            "the number of requests",
            ["status", "method"],
            namespace=namespace,
            registry=registry,
        )

        self.latency = QuantileSummary(
            "latency_ms",
            "latency summary in milliseconds",
            ["method"],
            namespace=namespace,
            objectives=LATENCY_OBJECTIVES,
            registry=registry,
        )

        # Ejection calls initiated periodically, per the SLA evaluation window.
        self.periodic_ejection_requests = Counter(
            "periodic_ejection_requests",
            "the total number of periodic ejection requests",
            ["status"],
            namespace=namespace,
            registry=registry,
        )

        # Ejection calls initiated urgently due to bad network health.
        self.urgent_ejection_requests = Counter(
            "urgent_ejection_requests",
            "the total number of urgent ejection requests",
            ["status"],
            namespace=namespace,
            registry=registry,
        )

        # Requested, not actually ejected: the ejection contract may rate limit.
        self.operators_to_eject = Counter(
            "operators_to_eject",
            "the total number of operators requested to eject",
            ["quorum"],
            namespace=namespace,
            registry=registry,
        )

        self.stake_share_to_eject = Gauge(
            "stake_share_to_eject",
            "the total stake share requested to eject",
            ["quorum"],
            namespace=namespace,
            registry=registry,
        )

        self.ejection_gas_used = Gauge(
            "ejection_gas_used",
            "Gas used for operator ejection",
            namespace=namespace,
            registry=registry,
        )

        self._ejection_counters = {
            EjectionMode.PERIODIC: self.periodic_ejection_requests,
            EjectionMode.URGENT: self.urgent_ejection_requests,
        }

    @property
    def collectors(self) -> list[Collector]:
        """Every metric this store registered."""
        return [
            self.num_requests,
            self.latency,
            self.periodic_ejection_requests,
            self.urgent_ejection_requests,
            self.operators_to_eject,
            self.stake_share_to_eject,
            self.ejection_gas_used,
        ]

    def record_latency(self, method: str, milliseconds: float) -> None:
        """Observe the latency of a request to ``method``."""
        self.latency.labels(method=method).observe(float(milliseconds))

    def record_request_outcome(self, method: str, outcome: RequestOutcome | str) -> None:
        """Count a finished request by outcome and method."""
        try:
            status = RequestOutcome(outcome).value
        except ValueError:
            self.logger.warning(
                "Ignoring request with unknown outcome", method=method, outcome=outcome
            )
            return
        self.num_requests.labels(status=status, method=method).inc()

    def increment_successful_request_num(self, method: str) -> None:
        self.record_request_outcome(method, RequestOutcome.SUCCESS)

    def increment_failed_request_num(self, method: str) -> None:
        self.record_request_outcome(method, RequestOutcome.FAILED)

    def increment_not_found_request_num(self, method: str) -> None:
        self.record_request_outcome(method, RequestOutcome.NOT_FOUND)

    def record_ejection_request(
        self, mode: EjectionMode | str, status_code: StatusCode | int | str
    ) -> None:
        """Count an ejection request under its trigger mode.

        Modes other than periodic and urgent touch no series.
        """
        try:
            counter = self._ejection_counters[EjectionMode(mode)]
        except ValueError:
            self.logger.warning("Ignoring ejection request with unknown mode", mode=mode)
            return
        counter.labels(status=StatusCode.label_for(status_code)).inc()

    def record_operators_requested_for_ejection(
        self,
        counts_by_quorum: Mapping[int, int],
        stake_share_by_quorum: Mapping[int, float],
    ) -> None:
        """Record the latest ejection decision.

        Operator counts accumulate per quorum; stake shares replace the
        previous value for the quorum.
        """
        for quorum, count in counts_by_quorum.items():
            if count < 0:
                self.logger.warning(
                    "Ignoring negative operator count", quorum=quorum, count=count
                )
                continue
            self.operators_to_eject.labels(quorum=str(quorum)).inc(count)

        for quorum, stake_share in stake_share_by_quorum.items():
            self.stake_share_to_eject.labels(quorum=str(quorum)).set(stake_share)

    def record_ejection_gas_used(self, gas: int) -> None:
        """Replace the gas gauge with the most recent ejection gas cost."""
        self.ejection_gas_used.set(float(gas))
