"""MongoDB adapter – MongoCollection (DocumentCollection over motor)."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from pymongo import ReturnDocument

from social_services.adapters.mongodb.errors import storage_errors
from social_services.adapters.mongodb.filters import to_mongo_filter, to_mongo_projection
from social_services.adapters.mongodb.handle import MongoQueryableHandle
from social_services.application.query.expression import Expression
from social_services.application.query.handle import Document, Projection
from social_services.kernel.time import Clock, SystemClock


class MongoCollection:
    """DocumentCollection backed by a ``motor`` collection.

    Usage::

        client = AsyncIOMotorClient(settings.mongo_uri)
        users = MongoCollection(client[settings.database_name]["users"])
        handle = users.query(Eq("role", "user"))
    """

    def __init__(self, collection: Any, clock: Clock | None = None) -> None:
        self._col = collection
        self._clock = clock or SystemClock()
        self.name: str = getattr(collection, "name", "<collection>")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def query(self, scope: Expression | None = None) -> MongoQueryableHandle:
        handle = MongoQueryableHandle(self._col)
        return handle.where(scope) if scope is not None else handle

    async def find_one(self, where: Expression, projection: Projection | None = None) -> Document | None:
        with storage_errors("find_one", self.name):
            return await self._col.find_one(to_mongo_filter(where), to_mongo_projection(projection))

    async def find_many(
        self, where: Expression | None = None, projection: Projection | None = None
    ) -> list[Document]:
        handle = self.query(where)
        if projection is not None:
            handle = handle.select(projection)
        return await handle.execute()

    async def count_by(self, field: str, values: Sequence[Any]) -> dict[Any, int]:
        pipeline = [
            {"$match": {field: {"$in": list(values)}}},
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
        ]
        with storage_errors("aggregate", self.name):
            return {row["_id"]: row["count"] async for row in self._col.aggregate(pipeline)}

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert_one(self, document: Mapping[str, Any]) -> Document:
        now = self._clock.now()
        stored = dict(document)
        stored.setdefault("createdAt", now)
        stored["updatedAt"] = now
        with storage_errors("insert_one", self.name):
            result = await self._col.insert_one(stored)
        stored["_id"] = result.inserted_id
        return stored

    async def update_one(self, where: Expression, changes: Mapping[str, Any]) -> Document | None:
        update = {"$set": {**changes, "updatedAt": self._clock.now()}}
        with storage_errors("find_one_and_update", self.name):
            return await self._col.find_one_and_update(
                to_mongo_filter(where),
                update,
                return_document=ReturnDocument.AFTER,
            )

    async def update_many(self, where: Expression, changes: Mapping[str, Any]) -> int:
        update = {"$set": {**changes, "updatedAt": self._clock.now()}}
        with storage_errors("update_many", self.name):
            result = await self._col.update_many(to_mongo_filter(where), update)
        return result.modified_count

    async def delete_one(self, where: Expression) -> Document | None:
        with storage_errors("find_one_and_delete", self.name):
            return await self._col.find_one_and_delete(to_mongo_filter(where))


__all__ = ["MongoCollection"]
