"""Application storage – DocumentCollection port and id helpers."""
from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from bson import ObjectId

from social_services.application.query.expression import Expression
from social_services.application.query.handle import Document, Projection, QueryableHandle
from social_services.kernel.errors import ValidationError

__all__ = ["DocumentCollection", "as_object_id"]


def as_object_id(value: Any, *, field: str = "_id") -> ObjectId:
    """Accept an ``ObjectId`` or its 24-hex string form."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValidationError(
        f"Invalid {field}: {value!r}",
        errors=[{"field": field, "message": "must be a 24 character hex id"}],
    )


@runtime_checkable
class DocumentCollection(Protocol):
    """Port: one named collection of documents keyed by ``_id``.

    Writes stamp ``createdAt`` / ``updatedAt``. Reads and writes raise
    :class:`~social_services.kernel.errors.StorageError` on driver failure.
    """

    name: str

    def query(self, scope: Expression | None = None) -> QueryableHandle:
        """Return a handle over the documents matching *scope*."""
        ...

    async def insert_one(self, document: Mapping[str, Any]) -> Document: ...

    async def find_one(
        self, where: Expression, projection: Projection | None = None
    ) -> Document | None: ...

    async def find_many(
        self, where: Expression | None = None, projection: Projection | None = None
    ) -> list[Document]: ...

    async def update_one(self, where: Expression, changes: Mapping[str, Any]) -> Document | None:
        """``$set`` *changes* on the first match; return the updated document."""
        ...

    async def update_many(self, where: Expression, changes: Mapping[str, Any]) -> int: ...

    async def delete_one(self, where: Expression) -> Document | None:
        """Remove the first match; return it as it was before deletion."""
        ...

    async def count_by(self, field: str, values: Sequence[Any]) -> dict[Any, int]:
        """Group documents whose *field* is in *values* and count each group."""
        ...
