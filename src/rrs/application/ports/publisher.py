from __future__ import annotations

from typing import Protocol

RESERVATION_EVENTS_CHANNEL = "events:reservations"
WAITLIST_EVENTS_CHANNEL = "events:waitlist"


class EventPublisher(Protocol):
    def publish(self, channel: str, message: str) -> None: ...


class NullEventPublisher:
    def publish(self, channel: str, message: str) -> None:
        return None
