"""Application storage – InMemoryCollection for unit tests and local runs."""
from __future__ import annotations

import copy
from collections import Counter
from typing import Any, Mapping, Sequence

from bson import ObjectId

from social_services.application.query.expression import Expression, resolve_path
from social_services.application.query.handle import Document, Projection
from social_services.application.query.in_memory import InMemoryQueryableHandle
from social_services.kernel.time import Clock, SystemClock

__all__ = ["InMemoryCollection"]


class InMemoryCollection:
    """DocumentCollection kept in a Python list, in insertion order."""

    def __init__(self, name: str, clock: Clock | None = None) -> None:
        self.name = name
        self._clock = clock or SystemClock()
        self._docs: list[Document] = []

    @property
    def documents(self) -> list[Document]:
        """Snapshot of stored documents (copies)."""
        return copy.deepcopy(self._docs)

    def query(self, scope: Expression | None = None) -> InMemoryQueryableHandle:
        handle = InMemoryQueryableHandle(self._docs)
        return handle.where(scope) if scope is not None else handle

    async def insert_one(self, document: Mapping[str, Any]) -> Document:
        now = self._clock.now()
        stored = copy.deepcopy(dict(document))
        stored.setdefault("_id", ObjectId())
        stored.setdefault("createdAt", now)
        stored["updatedAt"] = now
        self._docs.append(stored)
        return copy.deepcopy(stored)

    async def find_one(self, where: Expression, projection: Projection | None = None) -> Document | None:
        for doc in self._docs:
            if where.matches(doc):
                return projection.apply(doc) if projection else copy.deepcopy(doc)
        return None

    async def find_many(
        self, where: Expression | None = None, projection: Projection | None = None
    ) -> list[Document]:
        handle = self.query(where)
        if projection is not None:
            handle = handle.select(projection)
        return await handle.execute()

    async def update_one(self, where: Expression, changes: Mapping[str, Any]) -> Document | None:
        for doc in self._docs:
            if where.matches(doc):
                self._apply(doc, changes)
                return copy.deepcopy(doc)
        return None

    async def update_many(self, where: Expression, changes: Mapping[str, Any]) -> int:
        updated = 0
        for doc in self._docs:
            if where.matches(doc):
                self._apply(doc, changes)
                updated += 1
        return updated

    async def delete_one(self, where: Expression) -> Document | None:
        for index, doc in enumerate(self._docs):
            if where.matches(doc):
                return self._docs.pop(index)
        return None

    async def count_by(self, field: str, values: Sequence[Any]) -> dict[Any, int]:
        wanted = list(values)
        counts: Counter[Any] = Counter()
        for doc in self._docs:
            value = resolve_path(doc, field)
            if value in wanted:
                counts[value] += 1
        return dict(counts)

    def _apply(self, doc: Document, changes: Mapping[str, Any]) -> None:
        for key, value in changes.items():
            doc[key] = copy.deepcopy(value)
        doc["updatedAt"] = self._clock.now()
