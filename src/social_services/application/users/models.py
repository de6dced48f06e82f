"""Application users – role and status vocabulary."""
from __future__ import annotations

from enum import Enum

__all__ = ["PROTECTED_FIELDS", "SECRET_FIELDS", "UserRole", "UserStatus"]


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"
    DELETE = "delete"


# never leave the service layer
SECRET_FIELDS = ("password", "authentication")

# owned by the service; a profile update may not touch them
PROTECTED_FIELDS = frozenset(
    {
        "_id",
        "role",
        "status",
        "verified",
        "password",
        "authentication",
        "stripeCustomerId",
        "createdAt",
        "updatedAt",
    }
)
