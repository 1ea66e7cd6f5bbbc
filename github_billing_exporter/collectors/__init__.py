"""
Billing collectors and their registration.
"""

from typing import TYPE_CHECKING

from ..const import DEFAULT_ENABLED
from ..utils.github_api import GitHubSession
from .actions import ActionsCollector
from .base import Collector, CollectorError, MetricSink, OrganizationCollector, merge_families
from .packages import PackagesCollector
from .storage import StorageCollector

if TYPE_CHECKING:
    from ..registry import Registry


BUILTIN_COLLECTORS: list[tuple[type[OrganizationCollector], bool]] = [
    (ActionsCollector, DEFAULT_ENABLED),
    (PackagesCollector, DEFAULT_ENABLED),
    (StorageCollector, DEFAULT_ENABLED),
]


def register_builtin_collectors(registry: "Registry", session: GitHubSession) -> None:
    """Register the GitHub billing collectors against a shared session."""
    for collector_cls, default_enabled in BUILTIN_COLLECTORS:
        registry.register(collector_cls.NAME, default_enabled, collector_cls.factory(session))


__all__ = [
    "Collector",
    "CollectorError",
    "MetricSink",
    "OrganizationCollector",
    "ActionsCollector",
    "PackagesCollector",
    "StorageCollector",
    "BUILTIN_COLLECTORS",
    "merge_families",
    "register_builtin_collectors",
]
