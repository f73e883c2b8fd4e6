from __future__ import annotations

from datetime import date, time

from rrs.application.ports.repositories import TableRepository
from rrs.application.use_cases.availability import AvailabilityChecker
from rrs.domain.reservation.entities import DEFAULT_DURATION_MINUTES, validate_party_size
from rrs.domain.table.entities import Table


class TableAllocator:
    def __init__(
        self,
        table_repository: TableRepository,
        availability_checker: AvailabilityChecker,
    ) -> None:
        self._table_repository = table_repository
        self._availability_checker = availability_checker

    def find_candidates(
        self,
        party_size: int,
        on_date: date,
        at_time: time,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
    ) -> list[Table]:
        validate_party_size(party_size)
        tables = self._table_repository.get_available(party_size)
        fitting = [
            table
            for table in tables
            if table.is_available
            and table.can_accommodate(party_size)
            and self._availability_checker.is_available(
                table.table_id, on_date, at_time, duration_minutes
            )
        ]
        # Tightest fit first; ties broken by table id.
        return sorted(fitting, key=lambda table: (table.capacity, str(table.table_id)))
