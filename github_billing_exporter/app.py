"""
Main application.

Handles:
- Building the active collector set
- Serving metrics over HTTP
- Graceful shutdown
"""

import signal
import threading
from typing import Any

from prometheus_client import CollectorRegistry, GCCollector, PlatformCollector, ProcessCollector, start_http_server

from .config.schema import Config
from .const import APP_NAME
from .logging import get_logger
from .orchestrator import BillingCollector
from .registry import Registry
from .utils.github_api import GitHubSession

logger = get_logger("app")


class Application:
    """
    Main application class.

    Owns the exposition registry, the HTTP server and the GitHub session.
    """

    def __init__(self, config: Config, registry: Registry, session: GitHubSession):
        """
        Initialize application.

        Args:
            config: Application configuration
            registry: Collector registry with enablement applied
            session: Shared GitHub session used by the collectors
        """
        self.config = config
        self.registry = registry
        self.session = session

        self.billing: BillingCollector | None = None
        self.metrics_registry = CollectorRegistry()

        self._server: Any = None
        self._server_thread: threading.Thread | None = None
        self._shutdown_event = threading.Event()

    def _register_metrics(self, billing: BillingCollector) -> None:
        """Register the billing collector and, unless disabled, exporter self-metrics."""
        self.metrics_registry.register(billing)

        if not self.config.web.disable_exporter_metrics:
            ProcessCollector(registry=self.metrics_registry)
            PlatformCollector(registry=self.metrics_registry)
            GCCollector(registry=self.metrics_registry)

    def _setup_signal_handlers(self) -> None:
        for sig in (signal.SIGTERM, signal.SIGINT):
            signal.signal(sig, self._signal_handler)

    def _signal_handler(self, signum: int, frame: Any) -> None:
        logger.info(f"Received signal {signal.Signals(signum).name}, shutting down")
        self._shutdown_event.set()

    def start(self) -> None:
        """
        Build collectors and start the metrics endpoint.

        Raises:
            CollectorError: If a collector cannot be created
        """
        logger.info(f"Starting {APP_NAME}")

        self.billing = BillingCollector.build(self.registry)
        logger.info(f"Active collectors: {', '.join(self.billing.collectors) or 'none'}")

        self._register_metrics(self.billing)

        web = self.config.web
        self._server, self._server_thread = start_http_server(
            web.port,
            addr=web.host,
            registry=self.metrics_registry,
        )
        logger.info(f"Listening on {web.listen_address}")

    def stop(self) -> None:
        """Stop the HTTP server and release the GitHub client."""
        logger.info(f"Stopping {APP_NAME}")

        if self._server is not None:
            self._server.shutdown()
            self._server.server_close()
            self._server = None

        if self._server_thread is not None:
            self._server_thread.join(timeout=5.0)
            self._server_thread = None

        self.session.close()

    def shutdown(self) -> None:
        """Request shutdown from another thread."""
        self._shutdown_event.set()

    def run(self) -> None:
        """Run until SIGINT or SIGTERM."""
        try:
            self.start()
            self._setup_signal_handlers()
            self._shutdown_event.wait()
        finally:
            self.stop()
