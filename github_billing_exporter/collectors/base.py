"""
Base collector interface for metric collection.

All collectors inherit from the abstract Collector class and implement
the update() method, emitting prometheus metric families into a shared sink.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

from prometheus_client.core import GaugeMetricFamily, Metric

from ..const import NAMESPACE
from ..utils.github_api import GitHubClient, GitHubSession


class CollectorError(Exception):
    """Exception raised when a collector cannot be built or updated."""

    pass


class MetricSink:
    """
    Thread-safe destination for metric families.

    Many collectors write concurrently during a collection cycle; each
    emit() is atomic. The sink is only read after every writer is done.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._metrics: list[Metric] = []

    def emit(self, metric: Metric) -> None:
        """Append a single metric family."""
        with self._lock:
            self._metrics.append(metric)

    def metrics(self) -> list[Metric]:
        """Get a snapshot of everything emitted so far."""
        with self._lock:
            return list(self._metrics)

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)


class Collector(ABC):
    """
    Abstract base class for billing collectors.

    A collector is built once at startup and then updated once per scrape.
    update() raises on failure; the orchestrator turns that into up=0.
    """

    # Registry name (override in subclasses)
    NAME: str = "unknown"

    @abstractmethod
    def update(self, sink: MetricSink) -> None:
        """
        Fetch data and emit metric families into the sink.

        Args:
            sink: Shared metric sink

        Raises:
            Exception: Any failure; contained by the orchestrator
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.NAME!r})"


def gauge(name: str, documentation: str, labels: list[str] | None = None) -> GaugeMetricFamily:
    """Create a gauge family under the exporter namespace."""
    return GaugeMetricFamily(f"{NAMESPACE}_{name}", documentation, labels=labels or [])


def merge_families(metrics: Iterable[Metric]) -> list[Metric]:
    """
    Merge metric families sharing a name into a single family.

    Several writers may emit the same family (one `up` per collector,
    one family per organization); the exposition format wants one.
    First-seen order is kept.
    """
    merged: dict[str, Metric] = {}
    for metric in metrics:
        existing = merged.get(metric.name)
        if existing is None:
            family = Metric(metric.name, metric.documentation, metric.type, metric.unit)
            family.samples = list(metric.samples)
            merged[metric.name] = family
        else:
            existing.samples.extend(metric.samples)
    return list(merged.values())


class OrganizationCollector(Collector):
    """
    Base class for collectors that query each configured organization.

    Every organization is attempted on each update; samples from the ones
    that answered are kept even if another organization fails.
    """

    def __init__(self, client: GitHubClient, orgs: list[str], logger: logging.Logger):
        if not orgs:
            raise CollectorError(f"{self.NAME}: no organizations configured")
        self.client = client
        self.orgs = list(orgs)
        self.logger = logger

    @classmethod
    def factory(cls, session: GitHubSession) -> Callable[[logging.Logger], Collector]:
        """Get a registry factory building this collector from the shared session."""

        def build(logger: logging.Logger) -> Collector:
            if not session.config.token:
                raise CollectorError(f"{cls.NAME}: no GitHub token configured")
            return cls(session.client, session.config.orgs, logger)

        return build

    @abstractmethod
    def update_org(self, org: str, sink: MetricSink) -> None:
        """Fetch one organization's billing data and emit its metrics."""
        pass

    def update(self, sink: MetricSink) -> None:
        failed: list[str] = []
        first_error: Exception | None = None

        for org in self.orgs:
            try:
                self.update_org(org, sink)
            except Exception as e:
                self.logger.debug(f"Failed to fetch {self.NAME} billing for {org}: {e}")
                failed.append(org)
                first_error = first_error or e

        if failed:
            raise CollectorError(
                f"{self.NAME} billing failed for {', '.join(failed)}: {first_error}"
            ) from first_error
