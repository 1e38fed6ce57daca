"""Tests for the metrics registry."""

from unittest.mock import MagicMock

import pytest
from prometheus_client import Gauge

from dataapi.domain.exceptions import MetricRegistrationError
from dataapi.domain.models import ErrorCode
from dataapi.observability.metrics import BlobStatusCollector, MetricsRegistry

OPENMETRICS_ACCEPT = "application/openmetrics-text; version=1.0.0; charset=utf-8"


class TestRegistration:
    """Test collector registration."""

    def test_duplicate_metric_name_rejected(self, metrics):
        """Test registering a name that is already taken fails loudly."""
        duplicate = Gauge(
            "ejection_gas_used",
            "duplicate",
            namespace="eigenda_dataapi",
            registry=None,
        )

        with pytest.raises(MetricRegistrationError) as exc_info:
            metrics.register(duplicate)

        assert exc_info.value.error_code == ErrorCode.REGISTRATION_ERROR
        assert "eigenda_dataapi_ejection_gas_used" in exc_info.value.names

    def test_duplicate_live_collector_rejected(self, live_metrics, blob_store):
        """Test a second collector for the same live metric fails."""
        with pytest.raises(MetricRegistrationError) as exc_info:
            live_metrics.register(BlobStatusCollector(blob_store))

        assert exc_info.value.names == ["dynamodb_blob_metadata_status_count"]
        assert len(live_metrics.live_collectors) == 1

    def test_duplicate_rejected_with_runtime_collectors(self):
        """Test conflicts are reported when runtime collectors are registered."""
        metrics = MetricsRegistry()
        duplicate = Gauge(
            "requests",
            "duplicate",
            namespace="eigenda_dataapi",
            registry=None,
        )

        with pytest.raises(MetricRegistrationError) as exc_info:
            metrics.register(duplicate)

        assert exc_info.value.names == ["eigenda_dataapi_requests"]

    def test_unregister(self, metrics):
        """Test an unregistered collector disappears from scrapes."""
        blob_store = MagicMock()
        blob_store.get_blob_metadata_count_by_status.return_value = 1
        collector = BlobStatusCollector(blob_store)
        metrics.register(collector)
        assert "dynamodb_blob_metadata_status_count" in metrics.scrape().text

        metrics.unregister(collector)

        assert metrics.live_collectors == []
        assert "dynamodb_blob_metadata_status_count" not in metrics.scrape().text

    def test_registries_are_independent(self):
        """Test two registries in one process do not collide."""
        first = MetricsRegistry(include_runtime_collectors=False)
        second = MetricsRegistry(include_runtime_collectors=False)

        first.store.record_ejection_gas_used(10)

        assert first.get_sample_value("eigenda_dataapi_ejection_gas_used") == 10
        assert second.get_sample_value("eigenda_dataapi_ejection_gas_used") == 0

    def test_custom_namespace(self):
        """Test the namespace prefixes every static metric."""
        metrics = MetricsRegistry(namespace="test_ns", include_runtime_collectors=False)
        metrics.store.increment_failed_request_num("Feed")

        assert (
            metrics.get_sample_value(
                "test_ns_requests_total", {"status": "failed", "method": "Feed"}
            )
            == 1
        )


class TestScrape:
    """Test rendering."""

    def test_text_format_by_default(self, metrics):
        """Test the classic text format without an Accept header."""
        metrics.store.record_ejection_gas_used(42)

        snapshot = metrics.scrape()

        assert snapshot.content_type.startswith("text/plain")
        assert "eigenda_dataapi_ejection_gas_used 42.0" in snapshot.text

    def test_openmetrics_when_requested(self, metrics):
        """Test OpenMetrics is negotiated from the Accept header."""
        snapshot = metrics.scrape(OPENMETRICS_ACCEPT)

        assert snapshot.content_type.startswith("application/openmetrics-text")
        assert snapshot.text.endswith("# EOF\n")

    def test_runtime_collectors(self):
        """Test process and platform metrics are included when enabled."""
        metrics = MetricsRegistry()

        text = metrics.scrape().text

        assert "python_info" in text
        assert "python_gc_objects_collected_total" in text

    def test_default_registry_builds(self):
        """Test the default configuration constructs and scrapes."""
        metrics = MetricsRegistry()
        metrics.store.increment_successful_request_num("FetchBlob")

        assert (
            metrics.get_sample_value(
                "eigenda_dataapi_requests_total",
                {"status": "success", "method": "FetchBlob"},
            )
            == 1
        )

    def test_counter_samples_carry_total_suffix(self, metrics):
        """Test counters are exposed under their _total sample names."""
        metrics.store.record_ejection_request("urgent", 0)

        text = metrics.scrape().text

        assert "# TYPE eigenda_dataapi_urgent_ejection_requests_total counter" in text
        assert 'eigenda_dataapi_urgent_ejection_requests_total{status="OK"} 1.0' in text

    def test_runtime_collectors_disabled(self, metrics):
        """Test runtime metrics are absent when disabled."""
        assert "python_info" not in metrics.scrape().text
