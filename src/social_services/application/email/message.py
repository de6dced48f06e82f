"""Application email – EmailMessage value object."""
from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["EmailMessage"]


@dataclass(frozen=True)
class EmailMessage:
    """A fully-rendered message ready for an :class:`EmailSender`."""

    to: tuple[str, ...]
    subject: str
    html_body: str
    text_body: str | None = None
    reply_to: str | None = None
    tags: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        if not self.to:
            raise ValueError("an email needs at least one recipient")
