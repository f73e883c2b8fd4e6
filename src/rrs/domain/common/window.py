from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from rrs.domain.common.errors import ValidationError


def ensure_wall_clock(at_time: time) -> None:
    """Reject times carrying a UTC offset; slots are restaurant-local wall-clock times."""
    if at_time.tzinfo is not None:
        raise ValidationError(
            f"time must not carry a UTC offset, got {at_time.isoformat()}"
        )


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval ``[start, end)`` a reservation occupies on a table."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError("window end must be after its start")

    @classmethod
    def from_slot(cls, on_date: date, at_time: time, duration_minutes: int) -> TimeWindow:
        ensure_wall_clock(at_time)
        start = datetime.combine(on_date, at_time)
        return cls(start=start, end=start + timedelta(minutes=duration_minutes))

    def overlaps(self, other: TimeWindow) -> bool:
        # Touching windows (one ends when the other starts) do not overlap.
        return self.start < other.end and other.start < self.end
