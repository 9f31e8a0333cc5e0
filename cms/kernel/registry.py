"""
LeeCMS Kernel — Component Registry

Read-only mapping from component type → RegistryEntry. Built once and handed
to the renderer and builder; nothing in the kernel reaches for a global
registry, so tests can pass a fixture registry instead.

Absence is a normal answer: lookup() returns None and callers degrade.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import MappingProxyType
from typing import Any

from cms.kernel.components import STANDARD_COMPONENTS
from cms.kernel.fields import default_data
from cms.kernel.types import RegistryEntry

DEFAULT_CATEGORY = "Basic"


class ComponentRegistry:
    """Immutable catalog of component types, in registration order."""

    def __init__(self, entries: Iterable[RegistryEntry]) -> None:
        by_type: dict[str, RegistryEntry] = {}
        for entry in entries:
            if entry.type in by_type:
                raise ValueError(f"Duplicate component type: {entry.type}")
            by_type[entry.type] = entry
        self._entries = MappingProxyType(by_type)

    def lookup(self, type: str) -> RegistryEntry | None:
        if not isinstance(type, str):
            return None
        return self._entries.get(type)

    def __contains__(self, type: object) -> bool:
        return isinstance(type, str) and type in self._entries

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def types(self) -> list[str]:
        return list(self._entries)

    def categories_of(self) -> list[str]:
        """Distinct categories, ordered by first registration."""
        seen: dict[str, None] = {}
        for entry in self._entries.values():
            seen.setdefault(entry.category or DEFAULT_CATEGORY, None)
        return list(seen)

    def by_category(self, category: str) -> list[RegistryEntry]:
        return [e for e in self._entries.values() if (e.category or DEFAULT_CATEGORY) == category]

    def default_data(self, type: str) -> dict[str, Any]:
        """Fresh data for a new instance of `type`; {} for unknown types."""
        entry = self.lookup(type)
        if entry is None:
            return {}
        return default_data(entry.fields)

    def catalog(self) -> list[dict[str, Any]]:
        """Serializable picker listing: [{category, components: [...]}, ...]."""
        return [
            {
                "category": category,
                "components": [e.to_dict() for e in self.by_category(category)],
            }
            for category in self.categories_of()
        ]


def default_registry() -> ComponentRegistry:
    """The standard storefront component catalog."""
    return ComponentRegistry(STANDARD_COMPONENTS)
