"""
Collector orchestration.

BillingCollector is the prometheus_client custom collector registered with
the exposition registry. On every scrape it runs all active collectors in
parallel, one worker thread each, and waits for all of them before
returning. A failing collector only turns its own `up` sample to 0.
"""

import logging
from collections.abc import Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor, wait
from types import MappingProxyType

from prometheus_client.core import GaugeMetricFamily, Metric
from prometheus_client.registry import Collector as ExpositionCollector

from .collectors.base import Collector, CollectorError, MetricSink, merge_families
from .const import NAMESPACE
from .logging import collector_logger, get_logger
from .registry import Registry

UP_NAME = f"{NAMESPACE}_up"
UP_HELP = "whether the named collector's last run succeeded"


logger = get_logger("orchestrator")


def up_family() -> GaugeMetricFamily:
    """Descriptor for the per-collector success indicator."""
    return GaugeMetricFamily(UP_NAME, UP_HELP, labels=["collector"])


def execute(name: str, collector: Collector, sink: MetricSink, log: logging.Logger) -> bool:
    """
    Run one collector update and record its success indicator.

    The collector's own metrics are written before the `up` sample. Errors
    are logged and never propagate. A BaseException still gets its `up` sample
    (0) before it unwinds the worker.

    Returns:
        True if the update succeeded
    """
    success = False
    try:
        collector.update(sink)
        success = True
    except Exception as e:
        log.error(f"Cannot collect metrics from {name}: {e}")
    finally:
        up = up_family()
        up.add_metric([name], 1.0 if success else 0.0)
        sink.emit(up)
    return success


class BillingCollector(ExpositionCollector):
    """
    Runs the active collector set for each scrape.

    Usage:
        billing = BillingCollector.build(registry)
        prometheus_registry.register(billing)
    """

    def __init__(self, collectors: Mapping[str, Collector], log: logging.Logger | None = None):
        self._collectors = MappingProxyType(dict(collectors))
        self.logger = log or logger

    @classmethod
    def build(cls, registry: Registry, log: logging.Logger | None = None) -> "BillingCollector":
        """
        Instantiate every enabled collector in the registry.

        Args:
            registry: Collector registry with enablement already applied
            log: Logger for the orchestrator (module logger if None)

        Returns:
            BillingCollector over the enabled collectors

        Raises:
            CollectorError: If any factory fails; nothing is returned
        """
        log = log or logger
        collectors: dict[str, Collector] = {}

        for entry in registry:
            if not entry.enabled:
                log.info(f"Collector disabled: {entry.name}")
                continue

            try:
                collectors[entry.name] = entry.factory(collector_logger(entry.name))
            except Exception as e:
                raise CollectorError(f"Failed to create collector {entry.name}: {e}") from e

            log.info(f"Collector enabled: {entry.name}")

        return cls(collectors, log)

    @property
    def collectors(self) -> Mapping[str, Collector]:
        """Active collectors by name (read-only)."""
        return self._collectors

    def describe(self) -> Iterator[Metric]:
        yield up_family()

    def run(self, sink: MetricSink) -> dict[str, bool]:
        """
        Update every active collector concurrently into one sink.

        One worker per collector with no ordering between them. Blocks until
        all have finished; there is no timeout.

        Returns:
            Success per collector name
        """
        if not self._collectors:
            return {}

        with ThreadPoolExecutor(
            max_workers=len(self._collectors),
            thread_name_prefix="collector",
        ) as executor:
            futures = {
                name: executor.submit(execute, name, collector, sink, collector_logger(name))
                for name, collector in self._collectors.items()
            }
            wait(futures.values())

        results = {}
        for name, future in futures.items():
            error = future.exception()
            if error is not None:
                self.logger.error(f"Collector {name} aborted: {error!r}")
                results[name] = False
            else:
                results[name] = future.result()
        return results

    def collect(self) -> Iterator[Metric]:
        sink = MetricSink()
        results = self.run(sink)

        failed = [name for name, ok in results.items() if not ok]
        if failed:
            self.logger.debug(f"Collection finished with {len(failed)} failed: {', '.join(sorted(failed))}")

        yield from merge_families(sink.metrics())

    def __repr__(self) -> str:
        return f"BillingCollector({', '.join(self._collectors)})"
