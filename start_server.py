#!/usr/bin/env python3
"""Run the Data API metrics exporter on its own."""

import signal
import sys
import threading

from dotenv import load_dotenv

# Load .env file before importing settings
load_dotenv()

from dataapi.config.settings import get_settings  # noqa: E402
from dataapi.domain.exceptions import MetricsConfigurationError  # noqa: E402
from dataapi.service import bootstrap  # noqa: E402


def main() -> int:
    """Start the exporter and block until interrupted."""
    try:
        settings = get_settings()
    except MetricsConfigurationError as e:
        print(f"Invalid configuration: {e} ({e.details})", file=sys.stderr)
        return 2

    _metrics, server = bootstrap(settings)
    if server is None:
        print("Metrics are disabled (METRICS_ENABLE_METRICS=false)", file=sys.stderr)
        return 0

    stop = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: stop.set())
    signal.signal(signal.SIGTERM, lambda *_: stop.set())

    while not stop.wait(1.0):
        if not server.is_running:
            return 1

    server.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
