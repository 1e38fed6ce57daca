"""Metrics collection and exposition."""

from .collectors import BlobStatusCollector, LiveSampleCollector
from .exporters import ExporterServer, create_metrics_app, create_metrics_router
from .quantiles import QuantileStream
from .registry import MetricsRegistry, ScrapeSnapshot
from .store import MetricStore
from .summary import QuantileSummary

__all__ = [
    "BlobStatusCollector",
    "ExporterServer",
    "LiveSampleCollector",
    "MetricStore",
    "MetricsRegistry",
    "QuantileStream",
    "QuantileSummary",
    "ScrapeSnapshot",
    "create_metrics_app",
    "create_metrics_router",
]
