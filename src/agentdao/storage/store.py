"""Typed entity store over a ``StorageBackend``."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

from ..core.exceptions import NotFoundError
from .backend import StorageBackend


class Entity(Protocol):
    kind: str

    @property
    def id(self) -> str: ...

    def to_dict(self) -> dict[str, Any]: ...


T = TypeVar("T", bound=Entity)


def generate_id() -> str:
    return str(uuid.uuid4())


class EntityStore(Generic[T]):
    """Stores one entity kind, converting between models and backend dicts.

    Writes are independent ``put`` calls; there are no transactions across
    entities and the last write wins.
    """

    def __init__(self, model: type[T], backend: StorageBackend) -> None:
        self.model = model
        self.backend = backend
        self.kind: str = model.kind

    def create(self, entity: T) -> str:
        self.backend.put(entity.id, entity.to_dict())
        return entity.id

    def get(self, entity_id: str | None) -> T | None:
        if not entity_id:
            return None
        data = self.backend.get(entity_id)
        if data is None:
            return None
        return self.model.from_dict(data)  # type: ignore[attr-defined]

    def require(self, entity_id: str | None, code: str | None = None) -> T:
        """Get an entity or raise ``<KIND>_NOT_FOUND``."""
        entity = self.get(entity_id)
        if entity is None:
            label = self.kind.replace("_", " ").capitalize()
            raise NotFoundError(f"{label} not found", code=code or f"{self.kind.upper()}_NOT_FOUND")
        return entity

    def save(self, entity: T) -> None:
        self.backend.put(entity.id, entity.to_dict())

    def update(self, entity_id: str, **patch: Any) -> T:
        entity = self.require(entity_id)
        for name, value in patch.items():
            if not hasattr(entity, name):
                raise AttributeError(f"{self.model.__name__} has no field {name!r}")
            setattr(entity, name, value)
        self.save(entity)
        return entity

    def list(self) -> list[T]:
        return [self.model.from_dict(d) for d in self.backend.values()]  # type: ignore[attr-defined]

    def find(self, predicate: Callable[[T], bool]) -> T | None:
        for entity in self.list():
            if predicate(entity):
                return entity
        return None

    def __len__(self) -> int:
        return sum(1 for _ in self.backend.keys())
