"""Key-value storage backends for entity records.

Backends hold plain JSON-like dicts. ``MemoryBackend`` is the default; other
backends register a factory with ``BackendRegistry`` and are selected by name
through ``AGENTDAO_STORAGE_BACKEND``.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterator
from typing import Any, Protocol

from ..core.exceptions import ConfigException

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Protocol for record persistence, one instance per entity kind."""

    def get(self, key: str) -> dict[str, Any] | None:
        """Get a record by key."""
        ...

    def put(self, key: str, value: dict[str, Any]) -> None:
        """Insert or replace a record."""
        ...

    def delete(self, key: str) -> bool:
        """Delete a record. Returns True if it existed."""
        ...

    def keys(self) -> Iterator[str]:
        """Keys in insertion order."""
        ...

    def values(self) -> Iterator[dict[str, Any]]:
        """Records in insertion order."""
        ...


class MemoryBackend:
    """In-memory backend. Replacing a key keeps its original position."""

    def __init__(self, name: str = "memory") -> None:
        self.name = name
        self._records: dict[str, dict[str, Any]] = {}

    def get(self, key: str) -> dict[str, Any] | None:
        record = self._records.get(key)
        return copy.deepcopy(record) if record is not None else None

    def put(self, key: str, value: dict[str, Any]) -> None:
        self._records[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        return self._records.pop(key, None) is not None

    def keys(self) -> Iterator[str]:
        return iter(list(self._records))

    def values(self) -> Iterator[dict[str, Any]]:
        return (copy.deepcopy(r) for r in list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records


BackendFactory = Callable[[str], StorageBackend]


class BackendRegistry:
    """Maps backend names to factories taking the entity kind."""

    _factories: dict[str, BackendFactory] = {"memory": MemoryBackend}

    @classmethod
    def register(cls, name: str, factory: BackendFactory) -> None:
        cls._factories[name] = factory
        logger.info("Registered storage backend %r", name)

    @classmethod
    def available(cls) -> list[str]:
        return sorted(cls._factories)

    @classmethod
    def create(cls, name: str, kind: str) -> StorageBackend:
        factory = cls._factories.get(name)
        if factory is None:
            raise ConfigException(
                f"Unknown storage backend {name!r}. Available: {', '.join(cls.available())}",
            )
        return factory(kind)
