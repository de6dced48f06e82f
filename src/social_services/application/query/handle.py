"""Application query – QueryableHandle port and Projection value object."""
from __future__ import annotations

import copy
import dataclasses
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from social_services.application.pagination import Sort
from social_services.application.query.expression import MISSING, Expression, resolve_path

__all__ = ["Document", "Projection", "QueryableHandle"]

Document = dict[str, Any]


@dataclasses.dataclass(frozen=True)
class Projection:
    """Which document fields a read returns.

    Either an inclusion list (``_id`` is kept unless listed in *exclude*) or
    an exclusion list.
    """

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.include and not self.exclude

    def apply(self, document: Mapping[str, Any]) -> Document:
        """Project *document* in Python (used by the in-memory handle)."""
        if self.include:
            out: Document = {}
            keep = list(self.include)
            if "_id" not in self.exclude and "_id" not in keep:
                keep.insert(0, "_id")
            for path in keep:
                value = resolve_path(document, path)
                if value is not MISSING:
                    _set_path(out, path, copy.deepcopy(value))
            return out
        out = copy.deepcopy(dict(document))
        for path in self.exclude:
            _drop_path(out, path)
        return out


def _set_path(target: Document, path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    for part in parents:
        target = target.setdefault(part, {})
    target[leaf] = value


def _drop_path(target: Document, path: str) -> None:
    *parents, leaf = path.split(".")
    for part in parents:
        nxt = target.get(part)
        if not isinstance(nxt, dict):
            return
        target = nxt
    target.pop(leaf, None)


@runtime_checkable
class QueryableHandle(Protocol):
    """Port: a collection read that can be refined before it runs.

    Every refining call returns a new handle; the receiver is left as it
    was, so one scoped base handle can serve both the page read and the
    count. ``execute`` and ``count`` raise
    :class:`~social_services.kernel.errors.StorageError` on driver failure.
    """

    def where(self, expression: Expression) -> "QueryableHandle": ...

    def search(self, fields: Sequence[str], term: str) -> "QueryableHandle": ...

    def sort_by(self, sorts: Sequence[Sort]) -> "QueryableHandle": ...

    def skip(self, n: int) -> "QueryableHandle": ...

    def limit(self, n: int) -> "QueryableHandle": ...

    def select(self, projection: Projection) -> "QueryableHandle": ...

    async def execute(self) -> list[Document]: ...

    async def count(self) -> int: ...
