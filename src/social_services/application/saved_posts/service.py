"""Application saved posts – per-user bookmarks of posts."""
from __future__ import annotations

from typing import Any, Mapping, Sequence

from social_services.application.query import Eq
from social_services.application.query.handle import Document
from social_services.application.storage import DocumentCollection, as_object_id, populate
from social_services.observability.logging import get_logger

__all__ = ["POST_FIELDS", "PostReference", "SavedPostService"]

logger = get_logger(__name__)

POST_FIELDS = ("_id", "title", "images", "author", "category", "subCategory", "comments", "likes", "views")

# field on the post -> (collection it points into, fields to keep)
PostReference = tuple[DocumentCollection, Sequence[str]]


class SavedPostService:
    """Toggle and list a user's saved posts.

    *post_references* describes ids inside a post that should be resolved
    too, e.g. ``{"author": (users, ("userName", "email", "profile"))}``.
    """

    def __init__(
        self,
        saved_posts: DocumentCollection,
        posts: DocumentCollection,
        post_references: Mapping[str, PostReference] | None = None,
    ) -> None:
        self._saved = saved_posts
        self._posts = posts
        self._references = dict(post_references or {})

    async def toggle(self, user_id: Any, post_id: Any) -> Document | None:
        """Save the post, or remove the save when it already exists (returns ``None``)."""
        where = Eq("userId", as_object_id(user_id, field="userId")) & Eq(
            "postId", as_object_id(post_id, field="postId")
        )
        existing = await self._saved.find_one(where)
        if existing is not None:
            await self._saved.delete_one(Eq("_id", existing["_id"]))
            logger.info("saved_post.removed", user_id=str(user_id), post_id=str(post_id))
            return None
        saved = await self._saved.insert_one(
            {"userId": as_object_id(user_id, field="userId"), "postId": as_object_id(post_id, field="postId")}
        )
        logger.info("saved_post.added", user_id=str(user_id), post_id=str(post_id))
        return saved

    async def list_for_user(self, user_id: Any) -> list[Document]:
        saves = await self._saved.find_many(Eq("userId", as_object_id(user_id, field="userId")))
        if not saves:
            return []
        entries = await populate(
            [{**save, "post": save.get("postId")} for save in saves],
            "post",
            self._posts,
            POST_FIELDS,
        )
        found = [entry["post"] for entry in entries if entry["post"] is not None]
        for field, (source, fields) in self._references.items():
            found = await populate(found, field, source, fields)
        by_id = {post["_id"]: post for post in found}
        return [
            {**entry, "post": by_id.get(entry["postId"]) if entry["post"] is not None else None}
            for entry in entries
        ]
