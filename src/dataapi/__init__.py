"""Disperser Data API metrics: in-process metric store and Prometheus exporter."""

__version__ = "0.1.0"
__description__ = (
    "Process-local metrics registry and pull-based Prometheus exporter "
    "for the disperser Data API"
)
