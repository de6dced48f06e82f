"""Application notifications – NotificationService."""
from __future__ import annotations

from typing import Any, Mapping

from social_services.application.notifications.models import NotificationType, RecipientRole
from social_services.application.notifications.publisher import NotificationPublisher, channel_for
from social_services.application.query import Eq, QueryBuilder, QuerySettings
from social_services.application.query.handle import Document
from social_services.application.storage import DocumentCollection, as_object_id
from social_services.kernel.errors import ValidationError
from social_services.observability.logging import get_logger

__all__ = ["NotificationService"]

logger = get_logger(__name__)


class NotificationService:
    """Stores notification records and pushes each new one to live subscribers."""

    SEARCHABLE_FIELDS = ("title", "message")

    def __init__(
        self,
        notifications: DocumentCollection,
        publisher: NotificationPublisher,
        query_settings: QuerySettings | None = None,
    ) -> None:
        self._notifications = notifications
        self._publisher = publisher
        self._query_settings = query_settings

    async def create(
        self,
        *,
        recipient: Any,
        title: str,
        message: str,
        type: str = NotificationType.INFO.value,  # noqa: A002
        recipient_role: str = RecipientRole.USER.value,
        sender: Any = None,
        link: str | None = None,
    ) -> Document:
        """Insert a notification and publish it on the recipient role's channel."""
        kind = _enum_value(NotificationType, type, "type")
        role = _enum_value(RecipientRole, recipient_role, "recipientRole")
        record: dict[str, Any] = {
            "recipient": as_object_id(recipient, field="recipient"),
            "recipientRole": role,
            "title": title,
            "message": message,
            "type": kind,
            "read": False,
        }
        if sender is not None:
            record["sender"] = as_object_id(sender, field="sender")
        if link:
            record["link"] = link
        stored = await self._notifications.insert_one(record)
        await self._publisher.publish(channel_for(role), stored)
        logger.info("notification.created", notification_id=str(stored["_id"]), channel=channel_for(role))
        return stored

    async def list_for_recipient(self, recipient_id: Any, raw_query: Mapping[str, Any]) -> dict[str, Any]:
        scope = Eq("recipient", as_object_id(recipient_id, field="recipient"))
        builder = (
            QueryBuilder(self._notifications.query(scope), raw_query, self._query_settings)
            .search(self.SEARCHABLE_FIELDS)
            .filter()
            .sort()
            .paginate()
            .fields()
        )
        page = await builder.fetch()
        return page.to_dict()

    async def mark_all_read(self, recipient_id: Any) -> int:
        where = Eq("recipient", as_object_id(recipient_id, field="recipient")) & Eq("read", False)
        return await self._notifications.update_many(where, {"read": True})


def _enum_value(enum_cls: Any, value: str, field: str) -> str:
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(
            f"Invalid {field} {value!r}; expected one of: {allowed}",
            errors=[{"field": field, "message": f"expected one of: {allowed}"}],
        ) from None
