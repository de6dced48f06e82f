"""Application notifications – notification record vocabulary."""
from __future__ import annotations

from enum import Enum

__all__ = ["NotificationType", "RecipientRole"]


class NotificationType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


class RecipientRole(str, Enum):
    ADMIN = "admin"
    USER = "user"
