from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from enum import Enum

from rrs.domain.common.errors import InvalidTransitionError, ValidationError
from rrs.domain.common.ids import CustomerId, ReservationId, TableId
from rrs.domain.common.status import parse_status
from rrs.domain.common.window import TimeWindow, ensure_wall_clock

MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 20
DEFAULT_DURATION_MINUTES = 120
MAX_NOTES_LENGTH = 500


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, raw: str | None) -> ReservationStatus:
        return parse_status(cls, raw)


ACTIVE_RESERVATION_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})


def validate_party_size(party_size: int) -> None:
    if not MIN_PARTY_SIZE <= party_size <= MAX_PARTY_SIZE:
        raise ValidationError(
            f"party size must be between {MIN_PARTY_SIZE} and {MAX_PARTY_SIZE}, got {party_size}"
        )


@dataclass(frozen=True)
class Reservation:
    reservation_id: ReservationId
    customer_id: CustomerId
    table_id: TableId
    reservation_date: date
    reservation_time: time
    party_size: int
    status: ReservationStatus
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    notes: str | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        validate_party_size(self.party_size)
        if self.duration_minutes <= 0:
            raise ValidationError("duration_minutes must be > 0")
        if self.notes is not None and len(self.notes) > MAX_NOTES_LENGTH:
            raise ValidationError(f"notes must be at most {MAX_NOTES_LENGTH} characters")

    @property
    def window(self) -> TimeWindow:
        return TimeWindow.from_slot(
            self.reservation_date, self.reservation_time, self.duration_minutes
        )

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_RESERVATION_STATUSES

    @property
    def can_be_cancelled(self) -> bool:
        return self.status not in (ReservationStatus.COMPLETED, ReservationStatus.CANCELLED)

    def confirm(self) -> Reservation:
        if self.status != ReservationStatus.PENDING:
            raise InvalidTransitionError(
                f"cannot confirm reservation {self.reservation_id} from status={self.status.value}"
            )
        return replace(self, status=ReservationStatus.CONFIRMED)

    def complete(self) -> Reservation:
        if self.status != ReservationStatus.CONFIRMED:
            raise InvalidTransitionError(
                f"cannot complete reservation {self.reservation_id} "
                f"from status={self.status.value}"
            )
        return replace(self, status=ReservationStatus.COMPLETED)

    def cancel(self) -> Reservation:
        if not self.can_be_cancelled:
            raise InvalidTransitionError(
                f"cannot cancel reservation {self.reservation_id} from status={self.status.value}"
            )
        return replace(self, status=ReservationStatus.CANCELLED)


def validate_booking_request(
    reservation_date: date,
    reservation_time: time,
    party_size: int,
    duration_minutes: int,
    now: datetime,
) -> None:
    validate_party_size(party_size)
    if duration_minutes <= 0:
        raise ValidationError("duration_minutes must be > 0")
    ensure_wall_clock(reservation_time)
    start = datetime.combine(reservation_date, reservation_time)
    if start <= now:
        raise ValidationError(
            f"reservation must start in the future, got {start.isoformat(timespec='minutes')}"
        )


def create_reservation(
    reservation_id: ReservationId,
    customer_id: CustomerId,
    table_id: TableId,
    reservation_date: date,
    reservation_time: time,
    party_size: int,
    now: datetime,
    duration_minutes: int = DEFAULT_DURATION_MINUTES,
    notes: str | None = None,
    confirmed: bool = False,
) -> Reservation:
    validate_booking_request(
        reservation_date, reservation_time, party_size, duration_minutes, now
    )
    return Reservation(
        reservation_id=reservation_id,
        customer_id=customer_id,
        table_id=table_id,
        reservation_date=reservation_date,
        reservation_time=reservation_time,
        party_size=party_size,
        status=ReservationStatus.CONFIRMED if confirmed else ReservationStatus.PENDING,
        duration_minutes=duration_minutes,
        notes=notes or None,
        created_at=now,
    )
