"""Wiring for the metrics subsystem: settings in, running exporter out."""

from .config.settings import ApplicationSettings, BlobStoreSettings, MetricsSettings
from .domain.models import BlobStatus
from .infrastructure.blobstore import (
    BlobMetadataStore,
    DynamoDBBlobMetadataStore,
    InMemoryBlobMetadataStore,
)
from .observability.logging import get_logger, setup_logging
from .observability.metrics import BlobStatusCollector, ExporterServer, MetricsRegistry

logger = get_logger(__name__)


def create_blob_store(settings: BlobStoreSettings) -> BlobMetadataStore:
    """DynamoDB when a table is configured, in-memory otherwise."""
    if settings.use_dynamodb:
        return DynamoDBBlobMetadataStore(
            table_name=settings.table_name,
            status_index=settings.status_index,
            region=settings.region,
            endpoint_url=settings.endpoint_url,
        )
    logger.warning("No blob metadata table configured, using in-memory store")
    return InMemoryBlobMetadataStore()


def build_metrics(
    settings: MetricsSettings, blob_store: BlobMetadataStore
) -> MetricsRegistry:
    """Create the registry with the processing-blob live collector."""
    metrics = MetricsRegistry(
        namespace=settings.namespace,
        include_runtime_collectors=settings.include_runtime_collectors,
    )
    metrics.register(BlobStatusCollector(blob_store, BlobStatus.PROCESSING))
    return metrics


def start_metrics_server(
    settings: MetricsSettings, metrics: MetricsRegistry
) -> ExporterServer | None:
    """Start the exporter, or return None when metrics are disabled."""
    if not settings.enable_metrics:
        logger.info("Metrics disabled, exporter not started")
        return None

    server = ExporterServer(
        metrics, port=settings.http_port, host=settings.host, path=settings.path
    )
    server.start()
    return server


def bootstrap(
    settings: ApplicationSettings,
) -> tuple[MetricsRegistry, ExporterServer | None]:
    """Configure logging, build the registry and start the exporter."""
    setup_logging(
        level=settings.logging.level,
        format_type=settings.logging.format,
        log_file=settings.logging.file,
    )
    blob_store = create_blob_store(settings.blob_store)
    metrics = build_metrics(settings.metrics, blob_store)
    return metrics, start_metrics_server(settings.metrics, metrics)
