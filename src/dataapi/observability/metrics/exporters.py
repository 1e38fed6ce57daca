"""Prometheus scrape endpoint served over HTTP."""

import threading

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import Response

from ..logging import get_logger
from .registry import MetricsRegistry


def create_metrics_router(metrics: MetricsRegistry, path: str = "/metrics") -> APIRouter:
    """Create the scrape route for FastAPI.

    Args:
        metrics: Registry rendered on every request
        path: Route path

    Returns:
        FastAPI router with a single GET route
    """
    router = APIRouter(tags=["metrics"])

    # Sync handler: runs in the worker pool, so a slow live collector query
    # delays only its own scrape.
    @router.get(path)
    def get_metrics(request: Request) -> Response:
        snapshot = metrics.scrape(request.headers.get("accept"))
        return Response(content=snapshot.body, media_type=snapshot.content_type)

    return router


def create_metrics_app(metrics: MetricsRegistry, path: str = "/metrics") -> FastAPI:
    """Create a standalone application exposing only the scrape route."""
    app = FastAPI(
        title="Data API Metrics",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.include_router(create_metrics_router(metrics, path))
    return app


class ExporterServer:
    """Serves scrape requests in a background thread.

    The server is auxiliary: failing to bind or serve is logged and leaves
    the rest of the process running without metrics.
    """

    def __init__(
        self,
        metrics: MetricsRegistry,
        port: int,
        host: str = "0.0.0.0",
        path: str = "/metrics",
    ):
        self.metrics = metrics
        self.port = port
        self.host = host
        self.path = path
        self.app = create_metrics_app(metrics, path)
        self.logger = get_logger(__name__).bind(component="DataAPIMetrics")
        self.last_error: BaseException | None = None
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start serving and return immediately."""
        if self.is_running:
            self.logger.warning("Metrics server already running", port=self.port)
            return

        self.logger.info("Starting metrics server", host=self.host, port=self.port)
        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_level="warning",
            access_log=False,
            lifespan="off",
        )
        self.last_error = None
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._serve,
            args=(self._server,),
            daemon=True,
            name="MetricsExporter",
        )
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        """Ask the server to exit and wait for the thread."""
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
            self.logger.info("Stopped metrics server", port=self.port)
        self._server = None

    def _serve(self, server: uvicorn.Server) -> None:
        # uvicorn exits the thread with SystemExit when it cannot bind
        try:
            server.run()
        except (Exception, SystemExit) as e:
            self.last_error = e
            self.logger.error(
                "Prometheus server failed", port=self.port, error=repr(e)
            )
            return

        # stop() before startup completes also ends here, with should_exit set
        if not server.should_exit:
            self.logger.error(
                "Prometheus server failed", port=self.port, error="server exited"
            )
