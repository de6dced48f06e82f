"""Application notifications – records, publishing and listing."""
from social_services.application.notifications.models import NotificationType, RecipientRole
from social_services.application.notifications.publisher import (
    InMemoryNotificationPublisher,
    NotificationPublisher,
    PublishedEvent,
    channel_for,
)
from social_services.application.notifications.service import NotificationService

__all__ = [
    "InMemoryNotificationPublisher",
    "NotificationPublisher",
    "NotificationService",
    "NotificationType",
    "PublishedEvent",
    "RecipientRole",
    "channel_for",
]
