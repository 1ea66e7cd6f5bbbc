"""
Collector registry.

Maps collector names to their factories and enabled state. A Registry is
assembled by the startup routine through explicit register() calls, updated
once from parsed configuration via apply(), and only read afterwards.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from .collectors.base import Collector
from .config.schema import CollectorToggle

CollectorFactory = Callable[[logging.Logger], Collector]


class RegistrationError(Exception):
    """Exception raised for duplicate or unknown collector names."""

    pass


@dataclass
class RegistryEntry:
    """A registered collector and its enablement state."""

    name: str
    factory: CollectorFactory
    default_enabled: bool
    enabled: bool
    # Set when enablement came from configuration rather than the default
    overridden: bool = False

    @property
    def default_state(self) -> str:
        return "enabled" if self.default_enabled else "disabled"


class Registry:
    """
    Registry of collector factories.

    Usage:
        registry = Registry()
        registry.register("actions", True, ActionsCollector.factory(client, orgs))
        registry.apply(config.toggles)
        registry.resolve()  # {"actions": True}
    """

    def __init__(self):
        self._entries: dict[str, RegistryEntry] = {}

    def register(self, name: str, default_enabled: bool, factory: CollectorFactory) -> RegistryEntry:
        """
        Register a collector factory.

        Args:
            name: Unique collector name
            default_enabled: Whether the collector runs without an explicit toggle
            factory: Callable building the collector from its logger

        Returns:
            The new registry entry

        Raises:
            RegistrationError: If the name is already registered
        """
        if name in self._entries:
            raise RegistrationError(f"Collector already registered: {name}")

        entry = RegistryEntry(
            name=name,
            factory=factory,
            default_enabled=default_enabled,
            enabled=default_enabled,
        )
        self._entries[name] = entry
        return entry

    def apply(self, toggles: Iterable[CollectorToggle]) -> None:
        """
        Apply explicit enable/disable toggles from configuration.

        Raises:
            RegistrationError: If a toggle names an unregistered collector
        """
        toggles = list(toggles)
        for toggle in toggles:
            if toggle.name not in self._entries:
                raise RegistrationError(f"Unknown collector: {toggle.name}")

        for toggle in toggles:
            if not toggle.overridden:
                continue
            entry = self._entries[toggle.name]
            entry.enabled = toggle.value
            entry.overridden = True

    def resolve(self) -> dict[str, bool]:
        """Get the resolved enabled state of every registered collector."""
        return {name: entry.enabled for name, entry in self._entries.items()}

    def overridden(self) -> dict[str, bool]:
        """Get whether each collector's state was set explicitly."""
        return {name: entry.overridden for name, entry in self._entries.items()}

    def get(self, name: str) -> RegistryEntry | None:
        return self._entries.get(name)

    def entries(self) -> list[RegistryEntry]:
        return list(self._entries.values())

    def names(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        enabled = sum(1 for entry in self._entries.values() if entry.enabled)
        return f"Registry({len(self._entries)} collectors, {enabled} enabled)"
