"""Summary metric with quantile objectives.

``prometheus_client.Summary`` only exports ``_sum`` and ``_count``. This
collector adds ``{quantile="..."}`` samples estimated by a targeted
quantile stream per label set.
"""

import threading
from collections.abc import Iterable, Mapping, Sequence

from prometheus_client.core import CollectorRegistry, Metric
from prometheus_client.registry import Collector
from prometheus_client.utils import floatToGoString

from .quantiles import LockedQuantileStream

DEFAULT_OBJECTIVES: dict[float, float] = {0.5: 0.05, 0.9: 0.01, 0.99: 0.001}


class QuantileSummary(Collector):
    """Labeled summary exporting quantile estimates, sum and count."""

    def __init__(
        self,
        name: str,
        documentation: str,
        labelnames: Sequence[str] = (),
        namespace: str = "",
        objectives: Mapping[float, float] | None = None,
        registry: CollectorRegistry | None = None,
    ):
        if "quantile" in labelnames:
            raise ValueError("'quantile' is a reserved label name for summaries")

        self._name = "_".join(part for part in (namespace, name) if part)
        self._documentation = documentation
        self._labelnames = tuple(labelnames)
        self._objectives = dict(objectives or DEFAULT_OBJECTIVES)
        self._children: dict[tuple[str, ...], LockedQuantileStream] = {}
        self._lock = threading.Lock()

        if registry is not None:
            registry.register(self)

    @property
    def name(self) -> str:
        return self._name

    @property
    def objectives(self) -> dict[float, float]:
        return dict(self._objectives)

    def labels(self, *labelvalues: str, **labelkwargs: str) -> LockedQuantileStream:
        """Return the child series for the given label values, creating it."""
        if labelvalues and labelkwargs:
            raise ValueError("Can't pass both *args and **kwargs")
        if labelkwargs:
            if sorted(labelkwargs) != sorted(self._labelnames):
                raise ValueError("Incorrect label names")
            labelvalues = tuple(str(labelkwargs[n]) for n in self._labelnames)
        else:
            if len(labelvalues) != len(self._labelnames):
                raise ValueError("Incorrect label count")
            labelvalues = tuple(str(v) for v in labelvalues)

        with self._lock:
            child = self._children.get(labelvalues)
            if child is None:
                child = LockedQuantileStream(self._objectives)
                self._children[labelvalues] = child
            return child

    def observe(self, value: float) -> None:
        """Observe into the unlabeled series."""
        if self._labelnames:
            raise ValueError("Labeled summary requires labels() before observe()")
        self.labels().observe(value)

    def describe(self) -> Iterable[Metric]:
        return [Metric(self._name, self._documentation, "summary")]

    def collect(self) -> Iterable[Metric]:
        metric = Metric(self._name, self._documentation, "summary")
        with self._lock:
            children = list(self._children.items())

        for labelvalues, child in children:
            labels = dict(zip(self._labelnames, labelvalues))
            estimates, total, count = child.snapshot()
            for quantile, estimate in estimates.items():
                metric.add_sample(
                    self._name,
                    {**labels, "quantile": floatToGoString(quantile)},
                    estimate,
                )
            metric.add_sample(self._name + "_sum", labels, total)
            metric.add_sample(self._name + "_count", labels, float(count))
        return [metric]
