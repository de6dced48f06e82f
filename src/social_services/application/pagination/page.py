"""Application pagination – PaginationMeta and Page."""
from __future__ import annotations

import dataclasses
import math
from typing import Any, Callable, Generic, TypeVar

from social_services.application.pagination.page_request import PageRequest

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class PaginationMeta:
    """Page/limit/total/totalPages describing one result window."""

    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def compute(cls, request: PageRequest, total: int) -> "PaginationMeta":
        """Derive the metadata for *request* over *total* matching documents.

        An unbounded request reports a single page holding everything.
        """
        if request.limit is None:
            return cls(page=1, limit=max(total, 1), total=total, total_pages=1 if total else 0)
        total_pages = math.ceil(total / request.limit) if total > 0 else 0
        return cls(page=request.page, limit=request.limit, total=total, total_pages=total_pages)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


@dataclasses.dataclass
class Page(Generic[T]):
    """One window of results plus its metadata."""

    items: list[T]
    meta: PaginationMeta

    def map(self, fn: Callable[[T], Any]) -> "Page[Any]":
        """Return a new :class:`Page` with each item transformed by *fn*."""
        return Page(items=[fn(item) for item in self.items], meta=self.meta)

    def to_dict(self) -> dict[str, Any]:
        """Response body shape used by the HTTP layer: ``{data, meta}``."""
        return {"data": list(self.items), "meta": self.meta.to_dict()}


__all__ = ["Page", "PaginationMeta"]
