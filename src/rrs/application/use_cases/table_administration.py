from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable
from uuid import uuid4

from rrs.application.metrics.reservation_lifecycle import record_table_status_change
from rrs.application.ports.repositories import UnitOfWorkFactory
from rrs.application.use_cases.availability import AvailabilityChecker
from rrs.application.use_cases.table_allocation import TableAllocator
from rrs.domain.common.errors import ConflictError, NotFoundError, ValidationError
from rrs.domain.common.ids import CategoryId, ManagerId, TableId
from rrs.domain.reservation.entities import DEFAULT_DURATION_MINUTES, Reservation
from rrs.domain.table.entities import Table, TableCategory, TableStatus

logger = logging.getLogger(__name__)


class TableAdministration:
    """Manager-side table operations: registration, listing, status overrides."""

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._clock = clock

    def register(
        self,
        table_number: str,
        capacity: int,
        category_id: CategoryId,
        *,
        location: str | None = None,
        has_window: bool = False,
        is_private: bool = False,
        manager_id: ManagerId | None = None,
    ) -> Table:
        number = table_number.strip()
        if not number:
            raise ValidationError("table number must not be empty")

        with self._unit_of_work_factory() as uow:
            category = uow.tables.get_category(category_id)
            if category is None:
                raise NotFoundError(f"table category {category_id} not found")
            if not category.admits(capacity):
                raise ValidationError(
                    f"capacity {capacity} is outside category {category.name} band "
                    f"{category.min_capacity}..{category.max_capacity}"
                )
            if uow.tables.table_number_exists(number):
                raise ConflictError(f"table number {number} already exists")

            table = Table(
                table_id=TableId(f"tbl_{uuid4().hex[:12]}"),
                table_number=number,
                capacity=capacity,
                status=TableStatus.AVAILABLE,
                category=category,
                location=location,
                has_window=has_window,
                is_private=is_private,
                last_modified_by=str(manager_id) if manager_id else None,
                last_modified_at=self._clock(),
            )
            uow.tables.add(table)
            uow.commit()

        logger.info("table_registered", extra={"table_id": str(table.table_id)})
        return table

    def get(self, table_id: TableId) -> Table:
        with self._unit_of_work_factory() as uow:
            table = uow.tables.get(table_id)
        if table is None:
            raise NotFoundError(f"table {table_id} not found")
        return table

    def list_tables(self) -> list[Table]:
        with self._unit_of_work_factory() as uow:
            return uow.tables.get_all()

    def list_categories(self) -> list[TableCategory]:
        with self._unit_of_work_factory() as uow:
            return uow.tables.list_categories()

    def set_status(
        self,
        table_id: TableId,
        status: TableStatus,
        manager_id: ManagerId,
    ) -> Table:
        with self._unit_of_work_factory() as uow:
            table = uow.tables.get_for_update(table_id)
            if table is None:
                raise NotFoundError(f"table {table_id} not found")
            uow.tables.set_status(table_id, status, modified_by=str(manager_id))
            uow.commit()

        record_table_status_change(status)
        logger.info(
            "table_status_changed",
            extra={"table_id": str(table_id), "status": status.value},
        )
        return table.with_status(status, str(manager_id), self._clock())

    def check_availability(
        self,
        table_id: TableId,
        on_date: date,
        at_time: time,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
    ) -> list[Reservation]:
        """Reservations that clash with the window; empty when the table is free."""
        with self._unit_of_work_factory() as uow:
            if uow.tables.get(table_id) is None:
                raise NotFoundError(f"table {table_id} not found")
            return AvailabilityChecker(uow.reservations).conflicts(
                table_id, on_date, at_time, duration_minutes
            )

    def find_candidates(
        self,
        party_size: int,
        on_date: date,
        at_time: time,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
    ) -> list[Table]:
        with self._unit_of_work_factory() as uow:
            allocator = TableAllocator(uow.tables, AvailabilityChecker(uow.reservations))
            return allocator.find_candidates(party_size, on_date, at_time, duration_minutes)
