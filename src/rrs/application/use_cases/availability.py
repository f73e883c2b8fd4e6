from __future__ import annotations

from datetime import date, time, timedelta

from rrs.application.ports.repositories import ReservationRepository
from rrs.domain.common.errors import ValidationError
from rrs.domain.common.ids import TableId
from rrs.domain.common.window import TimeWindow
from rrs.domain.reservation.entities import DEFAULT_DURATION_MINUTES, Reservation


class AvailabilityChecker:
    """Answers whether a table is free for a requested window.

    Reads go straight to the repository it was built with; when that
    repository belongs to an open unit of work the answer is consistent with
    whatever that transaction goes on to write.
    """

    def __init__(self, reservation_repository: ReservationRepository) -> None:
        self._reservation_repository = reservation_repository

    def is_available(
        self,
        table_id: TableId,
        on_date: date,
        at_time: time,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
    ) -> bool:
        return not self.conflicts(table_id, on_date, at_time, duration_minutes)

    def conflicts(
        self,
        table_id: TableId,
        on_date: date,
        at_time: time,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
    ) -> list[Reservation]:
        if duration_minutes <= 0:
            raise ValidationError("duration_minutes must be > 0")
        requested = TimeWindow.from_slot(on_date, at_time, duration_minutes)

        # Neighbouring days are included so windows running past midnight are compared.
        dates = [on_date - timedelta(days=1), on_date, on_date + timedelta(days=1)]
        existing = self._reservation_repository.list_active_for_table(table_id, dates)
        return [
            reservation
            for reservation in existing
            if reservation.is_active and reservation.window.overlaps(requested)
        ]
