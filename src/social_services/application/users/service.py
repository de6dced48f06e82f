"""Application users – UserService.

Account lifecycle (registration, admin accounts, profile edits, soft
deletion, status changes) and the two paginated user listings. The service
talks to storage, email, payments and notifications only through the ports
it is constructed with.
"""
from __future__ import annotations

from typing import Any, Mapping

from social_services.application.email import EmailSender, create_account_email
from social_services.application.notifications import NotificationService, NotificationType, RecipientRole
from social_services.application.pagination import Page
from social_services.application.payments import PaymentCustomerGateway
from social_services.application.query import Eq, Expression, QueryBuilder, QuerySettings
from social_services.application.query.handle import Document
from social_services.application.storage import DocumentCollection, as_object_id
from social_services.application.users.models import PROTECTED_FIELDS, SECRET_FIELDS, UserRole, UserStatus
from social_services.application.users.otp import generate_otp, otp_authentication
from social_services.kernel.errors import (
    ConflictError,
    ExternalServiceError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from social_services.kernel.time import Clock, SystemClock
from social_services.observability.logging import get_logger
from social_services.security import PasswordHasher

__all__ = ["UserService"]

logger = get_logger(__name__)


class UserService:
    SEARCHABLE_FIELDS = ("name", "email")

    def __init__(
        self,
        users: DocumentCollection,
        posts: DocumentCollection,
        notifications: NotificationService,
        email_sender: EmailSender,
        payments: PaymentCustomerGateway,
        password_hasher: PasswordHasher,
        *,
        clock: Clock | None = None,
        query_settings: QuerySettings | None = None,
        otp_ttl_seconds: int = 180,
    ) -> None:
        self._users = users
        self._posts = posts
        self._notifications = notifications
        self._email = email_sender
        self._payments = payments
        self._passwords = password_hasher
        self._clock = clock or SystemClock()
        self._query_settings = query_settings
        self._otp_ttl_seconds = otp_ttl_seconds

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def create_user(self, payload: Mapping[str, Any]) -> Document:
        """Register a regular user.

        Sends the verification code by email, registers the payment
        customer and tells the super admin about the new account. A
        payment provider failure surfaces as :class:`ExternalServiceError`;
        the already stored user is kept so registration can be retried.
        """
        created = await self._insert_account(payload, role=UserRole.USER, verified=False)
        user_id = created["_id"]
        display_name = _display_name(created)

        code = generate_otp()
        await self._email.send(
            create_account_email(
                name=display_name,
                email=created["email"],
                otp=code,
                ttl_minutes=max(self._otp_ttl_seconds // 60, 1),
            )
        )
        changes: dict[str, Any] = {
            "authentication": otp_authentication(code, self._clock.now(), self._otp_ttl_seconds),
        }
        try:
            customer = await self._payments.create_customer(email=created["email"], name=display_name)
        except ExternalServiceError as exc:
            await self._users.update_one(Eq("_id", user_id), changes)
            logger.error("user.payment_customer_failed", user_id=str(user_id), error=exc.message)
            raise ExternalServiceError(
                exc.service,
                "Failed to create payment customer",
                status_code=exc.status_code,
                cause=exc,
            ) from exc
        changes["stripeCustomerId"] = customer.id
        stored = await self._users.update_one(Eq("_id", user_id), changes)

        await self._notify_super_admin(created)
        logger.info("user.created", user_id=str(user_id))
        return _public(stored or created)

    async def create_admin(self, payload: Mapping[str, Any]) -> Document:
        created = await self._insert_account(payload, role=UserRole.ADMIN, verified=True)
        logger.info("user.admin_created", user_id=str(created["_id"]))
        return _public(created)

    async def delete_admin(self, admin_id: Any) -> Document:
        where = Eq("_id", as_object_id(admin_id)) & Eq("role", UserRole.ADMIN.value)
        deleted = await self._users.delete_one(where)
        if deleted is None:
            raise NotFoundError("Admin", admin_id)
        logger.info("user.admin_deleted", user_id=str(deleted["_id"]))
        return _public(deleted)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_profile(self, user_id: Any) -> Document:
        user = await self._users.find_one(Eq("_id", as_object_id(user_id)))
        if user is None or user.get("status") == UserStatus.DELETE.value:
            raise NotFoundError("User", user_id)
        return _public(user)

    async def get_user_by_id(self, user_id: Any) -> Document | None:
        where = Eq("_id", as_object_id(user_id)) & Eq("status", UserStatus.ACTIVE.value)
        user = await self._users.find_one(where)
        return _public(user) if user is not None else None

    async def list_users(self, raw_query: Mapping[str, Any]) -> dict[str, Any]:
        """Verified regular users, each with the number of posts they authored."""
        scope = Eq("role", UserRole.USER.value) & Eq("verified", True)
        page = await self._list(scope, raw_query)
        ids = [user["_id"] for user in page.items if "_id" in user]
        counts = await self._posts.count_by("author", ids) if ids else {}
        page = page.map(lambda user: {**_public(user), "postCount": counts.get(user.get("_id"), 0)})
        return page.to_dict()

    async def list_admins(self, raw_query: Mapping[str, Any]) -> dict[str, Any]:
        scope = Eq("role", UserRole.ADMIN.value) & Eq("status", UserStatus.ACTIVE.value)
        page = await self._list(scope, raw_query)
        return page.map(_public).to_dict()

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    async def update_profile(self, user_id: Any, payload: Mapping[str, Any]) -> Document:
        if "email" in payload:
            raise ForbiddenError("Email cannot be changed")
        protected = sorted(PROTECTED_FIELDS.intersection(payload))
        if protected:
            raise ForbiddenError(f"{', '.join(protected)} cannot be changed through a profile update")
        where = Eq("_id", as_object_id(user_id))
        if await self._users.find_one(where) is None:
            raise NotFoundError("User", user_id)
        updated = await self._users.update_one(where, payload)
        if updated is None:
            raise NotFoundError("User", user_id)
        return _public(updated)

    async def delete_account(self, user_id: Any, password: str | None = None) -> Document | None:
        """Soft delete: the account keeps its data but gets ``status=delete``.

        Returns ``None`` when the user does not exist.
        """
        where = Eq("_id", as_object_id(user_id))
        user = await self._users.find_one(where)
        if password and user is not None and not self._passwords.verify(password, user.get("password") or ""):
            raise ValidationError(
                "Password is incorrect",
                errors=[{"field": "password", "message": "Password is incorrect"}],
            )
        updated = await self._users.update_one(where, {"status": UserStatus.DELETE.value})
        if updated is not None:
            logger.info("user.deleted", user_id=str(updated["_id"]))
        return _public(updated) if updated is not None else None

    async def update_status(self, user_id: Any, status: str) -> Document | None:
        try:
            value = UserStatus(status).value
        except ValueError:
            allowed = ", ".join(s.value for s in UserStatus)
            raise ValidationError(
                f"Invalid status {status!r}; expected one of: {allowed}",
                errors=[{"field": "status", "message": f"expected one of: {allowed}"}],
            ) from None
        updated = await self._users.update_one(Eq("_id", as_object_id(user_id)), {"status": value})
        if updated is not None:
            logger.info("user.status_changed", user_id=str(updated["_id"]), status=value)
        return _public(updated) if updated is not None else None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _insert_account(self, payload: Mapping[str, Any], *, role: UserRole, verified: bool) -> Document:
        email = payload.get("email")
        if not email:
            raise ValidationError("Email is required", errors=[{"field": "email", "message": "required"}])
        if await self._users.find_one(Eq("email", email)) is not None:
            raise ConflictError("Email already exists", detail={"email": email})
        record = dict(payload)
        record.pop("_id", None)
        record["role"] = role.value
        record["verified"] = verified
        record.setdefault("status", UserStatus.ACTIVE.value)
        if record.get("password"):
            record["password"] = self._passwords.hash(str(record["password"]))
        return await self._users.insert_one(record)

    async def _list(self, scope: Expression, raw_query: Mapping[str, Any]) -> Page[Document]:
        builder = (
            QueryBuilder(
                self._users.query(scope),
                raw_query,
                self._query_settings,
                hidden_fields=SECRET_FIELDS,
            )
            .search(self.SEARCHABLE_FIELDS)
            .filter()
            .paginate()
            .sort()
            .fields()
        )
        return await builder.fetch()

    async def _notify_super_admin(self, user: Document) -> None:
        where = Eq("role", UserRole.SUPER_ADMIN.value) & Eq("status", UserStatus.ACTIVE.value)
        admin = await self._users.find_one(where)
        if admin is None:
            logger.warning("user.super_admin_missing", user_id=str(user["_id"]))
            return
        await self._notifications.create(
            recipient=admin["_id"],
            sender=user["_id"],
            recipient_role=RecipientRole.ADMIN.value,
            type=NotificationType.INFO.value,
            title="New User Registration",
            message=f"A new user has been created: {_display_name(user)}",
        )


def _display_name(user: Mapping[str, Any]) -> str:
    return str(user.get("name") or user.get("userName") or user["email"])


def _public(user: Mapping[str, Any]) -> Document:
    return {key: value for key, value in user.items() if key not in SECRET_FIELDS}
