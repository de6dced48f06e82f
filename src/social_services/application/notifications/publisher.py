"""Application notifications – real-time publish port."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

__all__ = ["InMemoryNotificationPublisher", "NotificationPublisher", "PublishedEvent", "channel_for"]


def channel_for(recipient_role: str) -> str:
    """Channel name subscribers of one role listen on, e.g. ``notification::admin``."""
    return f"notification::{recipient_role}"


@runtime_checkable
class NotificationPublisher(Protocol):
    """Port: fan a payload out to every subscriber of *channel*.

    Injected into the services that emit events; there is no process-wide
    broadcaster.
    """

    async def publish(self, channel: str, payload: dict[str, Any]) -> None: ...


@dataclass(frozen=True)
class PublishedEvent:
    channel: str
    payload: dict[str, Any]


class InMemoryNotificationPublisher:
    """Publisher that records events in ``published``."""

    def __init__(self) -> None:
        self.published: list[PublishedEvent] = []

    async def publish(self, channel: str, payload: dict[str, Any]) -> None:
        self.published.append(PublishedEvent(channel, dict(payload)))

    def on(self, channel: str) -> list[dict[str, Any]]:
        return [e.payload for e in self.published if e.channel == channel]
