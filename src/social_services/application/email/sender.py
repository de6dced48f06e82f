"""Application email – EmailSender port and in-memory double."""
from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from social_services.application.email.message import EmailMessage

__all__ = ["EmailSender", "InMemoryEmailSender"]


@runtime_checkable
class EmailSender(Protocol):
    """Port: hand one message to the delivery mechanism."""

    async def send(self, message: EmailMessage) -> str:
        """Send *message*; returns an opaque message-id string."""
        ...


class InMemoryEmailSender:
    """EmailSender that keeps every message in ``sent``."""

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []

    async def send(self, message: EmailMessage) -> str:
        self.sent.append(message)
        return uuid.uuid4().hex

    def last(self) -> EmailMessage | None:
        return self.sent[-1] if self.sent else None

    def to(self, address: str) -> list[EmailMessage]:
        return [m for m in self.sent if address in m.to]
