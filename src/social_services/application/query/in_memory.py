"""Application query – InMemoryQueryableHandle over a list of dicts."""
from __future__ import annotations

import copy
import dataclasses
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Sequence

from bson import ObjectId

from social_services.application.pagination import Sort
from social_services.application.query.expression import (
    MISSING,
    Contains,
    Expression,
    all_of,
    any_of,
    resolve_path,
)
from social_services.application.query.handle import Document, Projection

__all__ = ["InMemoryQueryableHandle"]


@dataclasses.dataclass(frozen=True, eq=False)
class InMemoryQueryableHandle:
    """QueryableHandle that evaluates filter trees against a live document list.

    *documents* is read at :meth:`execute` / :meth:`count` time, so writes made
    through the owning collection after the handle was created are visible.
    Results are deep copies.
    """

    documents: Sequence[Mapping[str, Any]]
    expression: Expression | None = None
    sorts: tuple[Sort, ...] = ()
    offset: int = 0
    max_items: int | None = None
    projection: Projection | None = None

    def where(self, expression: Expression) -> "InMemoryQueryableHandle":
        return dataclasses.replace(self, expression=all_of(self.expression, expression))

    def search(self, fields: Sequence[str], term: str) -> "InMemoryQueryableHandle":
        expr = any_of(Contains(f, term) for f in fields)
        if expr is None or not term:
            return self
        return self.where(expr)

    def sort_by(self, sorts: Sequence[Sort]) -> "InMemoryQueryableHandle":
        return dataclasses.replace(self, sorts=tuple(sorts))

    def skip(self, n: int) -> "InMemoryQueryableHandle":
        return dataclasses.replace(self, offset=n)

    def limit(self, n: int) -> "InMemoryQueryableHandle":
        return dataclasses.replace(self, max_items=n)

    def select(self, projection: Projection) -> "InMemoryQueryableHandle":
        return dataclasses.replace(self, projection=projection)

    def _matching(self) -> list[Mapping[str, Any]]:
        if self.expression is None:
            return list(self.documents)
        return [doc for doc in self.documents if self.expression.matches(doc)]

    async def execute(self) -> list[Document]:
        results = self._matching()
        # least significant key first; list.sort is stable in both directions
        for criterion in reversed(self.sorts):
            results.sort(key=lambda d, f=criterion.field: _sort_key(d, f), reverse=criterion.descending)
        end = None if self.max_items is None else self.offset + self.max_items
        window = results[self.offset:end]
        if self.projection is not None and not self.projection.is_empty:
            return [self.projection.apply(doc) for doc in window]
        return [copy.deepcopy(dict(doc)) for doc in window]

    async def count(self) -> int:
        return len(self._matching())


def _sort_key(document: Mapping[str, Any], field: str) -> tuple[int, Any]:
    value = resolve_path(document, field)
    return (_type_rank(value), _comparable(value))


def _type_rank(value: Any) -> int:
    """Position of *value*'s type in MongoDB's cross-type sort order."""
    if value is MISSING or value is None:
        return 0
    # bool is an int subclass; BSON ranks it after ObjectId
    if isinstance(value, bool):
        return 7
    if isinstance(value, (int, float, Decimal)):
        return 1
    if isinstance(value, str):
        return 2
    if isinstance(value, Mapping):
        return 3
    if isinstance(value, (list, tuple)):
        return 4
    if isinstance(value, (bytes, bytearray)):
        return 5
    if isinstance(value, ObjectId):
        return 6
    if isinstance(value, datetime):
        return 8
    return 9


def _comparable(value: Any) -> Any:
    if value is MISSING or value is None:
        return 0
    if isinstance(value, (Mapping, list, tuple)) or _type_rank(value) == 9:
        return repr(value)
    if isinstance(value, datetime) and value.tzinfo is not None:
        # compared as naive UTC
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
