"""Application pagination – PageRequest, Sort, SortDirection."""
from __future__ import annotations

import dataclasses
from enum import Enum


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclasses.dataclass(frozen=True)
class Sort:
    """Single sort criterion."""
    field: str
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def parse(cls, token: str) -> "Sort":
        """Build a criterion from ``name`` or ``-name`` (descending)."""
        if token.startswith("-"):
            return cls(token[1:], SortDirection.DESC)
        return cls(token, SortDirection.ASC)

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


@dataclasses.dataclass(frozen=True)
class PageRequest:
    """Resolved offset pagination window.

    ``limit`` is ``None`` when the caller asked for every matching document
    (``limit=all``); ``page`` is then always 1.
    """
    page: int = 1
    limit: int | None = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit is not None and self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def unbounded(self) -> bool:
        return self.limit is None

    @property
    def skip(self) -> int:
        if self.limit is None:
            return 0
        return (self.page - 1) * self.limit


__all__ = ["PageRequest", "Sort", "SortDirection"]
