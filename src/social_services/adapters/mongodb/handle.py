"""MongoDB adapter – MongoQueryableHandle over a motor collection."""
from __future__ import annotations

import dataclasses
from typing import Any, Sequence

from social_services.adapters.mongodb.errors import storage_errors
from social_services.adapters.mongodb.filters import to_mongo_filter, to_mongo_projection, to_mongo_sort
from social_services.application.pagination import Sort
from social_services.application.query.expression import Contains, Expression, all_of, any_of
from social_services.application.query.handle import Document, Projection

__all__ = ["MongoQueryableHandle"]


@dataclasses.dataclass(frozen=True, eq=False)
class MongoQueryableHandle:
    """QueryableHandle that issues ``find`` / ``count_documents`` on a motor collection.

    Refinements only record state; the driver is called by :meth:`execute`
    and :meth:`count`, each with the complete filter document.
    """

    collection: Any
    expression: Expression | None = None
    sorts: tuple[Sort, ...] = ()
    offset: int = 0
    max_items: int | None = None
    projection: Projection | None = None

    @property
    def _name(self) -> str:
        return getattr(self.collection, "name", "<collection>")

    def where(self, expression: Expression) -> "MongoQueryableHandle":
        return dataclasses.replace(self, expression=all_of(self.expression, expression))

    def search(self, fields: Sequence[str], term: str) -> "MongoQueryableHandle":
        expr = any_of(Contains(f, term) for f in fields)
        if expr is None or not term:
            return self
        return self.where(expr)

    def sort_by(self, sorts: Sequence[Sort]) -> "MongoQueryableHandle":
        return dataclasses.replace(self, sorts=tuple(sorts))

    def skip(self, n: int) -> "MongoQueryableHandle":
        return dataclasses.replace(self, offset=n)

    def limit(self, n: int) -> "MongoQueryableHandle":
        return dataclasses.replace(self, max_items=n)

    def select(self, projection: Projection) -> "MongoQueryableHandle":
        return dataclasses.replace(self, projection=projection)

    async def execute(self) -> list[Document]:
        with storage_errors("find", self._name):
            cursor = self.collection.find(
                to_mongo_filter(self.expression),
                to_mongo_projection(self.projection),
            )
            if self.sorts:
                cursor = cursor.sort(to_mongo_sort(self.sorts))
            if self.offset:
                cursor = cursor.skip(self.offset)
            if self.max_items is not None:
                cursor = cursor.limit(self.max_items)
            return await cursor.to_list(length=None)

    async def count(self) -> int:
        with storage_errors("count_documents", self._name):
            return await self.collection.count_documents(to_mongo_filter(self.expression))
