from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from enum import Enum
from typing import Iterable

from rrs.domain.common.errors import InvalidTransitionError, ValidationError
from rrs.domain.common.ids import CustomerId, WaitlistEntryId
from rrs.domain.common.status import parse_status

DEFAULT_WAIT_MINUTES = 120


class WaitlistStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SEATED = "SEATED"
    EXPIRED = "EXPIRED"

    @classmethod
    def parse(cls, raw: str | None) -> WaitlistStatus:
        return parse_status(cls, raw)


@dataclass(frozen=True)
class WaitlistEntry:
    waitlist_id: WaitlistEntryId
    customer_id: CustomerId
    requested_date: date
    requested_time: time
    party_size: int
    status: WaitlistStatus
    queue_position: int
    wait_time_minutes: int = DEFAULT_WAIT_MINUTES
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.party_size <= 0:
            raise ValidationError("party size must be greater than 0")
        if self.queue_position <= 0:
            raise ValidationError("queue position must be greater than 0")
        if self.wait_time_minutes < 0:
            raise ValidationError("wait time cannot be negative")

    @property
    def is_active(self) -> bool:
        return self.status == WaitlistStatus.ACTIVE

    def ensure_active(self, action: str) -> None:
        if not self.is_active:
            raise InvalidTransitionError(
                f"cannot {action} waitlist entry {self.waitlist_id} "
                f"from status={self.status.value}"
            )

    def seat(self) -> WaitlistEntry:
        self.ensure_active("seat")
        return replace(self, status=WaitlistStatus.SEATED)

    def expire(self) -> WaitlistEntry:
        self.ensure_active("expire")
        return replace(self, status=WaitlistStatus.EXPIRED)


def next_queue_position(active_max_position: int | None) -> int:
    if active_max_position is None or active_max_position < 1:
        return 1
    return active_max_position + 1


def renumber(entries: Iterable[WaitlistEntry]) -> list[tuple[WaitlistEntryId, int]]:
    """Contiguous positions 1..N for the active entries, stable on prior position.

    Only assignments that actually change a position are returned.
    """
    active = [entry for entry in entries if entry.is_active]
    # Python's sort is stable, so ties keep their incoming (insertion) order.
    ordered = sorted(active, key=lambda entry: entry.queue_position)
    return [
        (entry.waitlist_id, new_position)
        for new_position, entry in enumerate(ordered, start=1)
        if entry.queue_position != new_position
    ]
