"""
Pytest configuration and fixtures.
"""

import logging
import threading
from collections.abc import Iterable

import pytest
from prometheus_client.core import Metric

from github_billing_exporter.collectors.base import Collector, MetricSink, gauge
from github_billing_exporter.logging import ROOT_LOGGER
from github_billing_exporter.orchestrator import UP_NAME
from github_billing_exporter.registry import Registry


class FakeCollector(Collector):
    """Collector with scripted behavior for orchestration tests."""

    NAME = "fake"

    def __init__(
        self,
        name: str,
        error: Exception | None = None,
        block: threading.Event | None = None,
    ):
        self.name = name
        self.error = error
        self.block = block
        self.calls = 0
        self.started = threading.Event()

    def update(self, sink: MetricSink) -> None:
        self.calls += 1
        self.started.set()
        if self.block is not None:
            self.block.wait()
        if self.error is not None:
            raise self.error
        family = gauge("fake_value", "Fake value", ["name"])
        family.add_metric([self.name], 42.0)
        sink.emit(family)


class FactorySpy:
    """Factory recording its calls and the loggers it received."""

    def __init__(self, collector: Collector | None = None, error: Exception | None = None):
        self.collector = collector
        self.error = error
        self.loggers = []

    @property
    def called(self) -> bool:
        return bool(self.loggers)

    def __call__(self, logger):
        self.loggers.append(logger)
        if self.error is not None:
            raise self.error
        return self.collector


def up_values(metrics: Iterable[Metric]) -> dict[str, float]:
    """Map collector name to its `up` value; fails on duplicates."""
    values: dict[str, float] = {}
    for metric in metrics:
        if metric.name != UP_NAME:
            continue
        for sample in metric.samples:
            name = sample.labels["collector"]
            assert name not in values, f"duplicate up sample for {name}"
            values[name] = sample.value
    return values


@pytest.fixture
def registry() -> Registry:
    return Registry()


@pytest.fixture
def sink() -> MetricSink:
    return MetricSink()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging() during a test."""
    yield
    root = logging.getLogger(ROOT_LOGGER)
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
