"""Application storage – reference population across collections."""
from __future__ import annotations

from typing import Any, Sequence

from social_services.application.query.expression import Compare, ComparisonOp
from social_services.application.query.handle import Document, Projection
from social_services.application.storage.collection import DocumentCollection

__all__ = ["populate"]


async def populate(
    documents: Sequence[Document],
    field: str,
    source: DocumentCollection,
    fields: Sequence[str] = (),
) -> list[Document]:
    """Replace the id held in *field* of each document with the referenced document.

    One ``_id in (...)`` read against *source*; *fields* limits what the
    referenced documents carry. References that no longer resolve become
    ``None``. Returns new dicts; *documents* is left untouched.
    """
    ids = list(dict.fromkeys(doc[field] for doc in documents if doc.get(field) is not None))
    if not ids:
        return [dict(doc) for doc in documents]
    projection = Projection(include=tuple(fields)) if fields else None
    found = await source.find_many(Compare("_id", ComparisonOp.IN, tuple(ids)), projection)
    by_id: dict[Any, Document] = {ref["_id"]: ref for ref in found}
    out: list[Document] = []
    for doc in documents:
        copy = dict(doc)
        if doc.get(field) is not None:
            copy[field] = by_id.get(doc[field])
        out.append(copy)
    return out
