from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from rrs.application.ports.repositories import TableUtilizationData, UnitOfWorkFactory
from rrs.domain.reservation.entities import Reservation, ReservationStatus
from rrs.domain.waitlist.entities import WaitlistEntry


@dataclass(frozen=True)
class DailyReservationReport:
    report_date: date
    total: int
    by_status: dict[ReservationStatus, int]
    reservations: list[Reservation] = field(default_factory=list)


@dataclass(frozen=True)
class WaitlistReport:
    report_date: date
    total_waiting: int
    average_wait_minutes: float
    entries: list[WaitlistEntry] = field(default_factory=list)


class ReservationReports:
    """Read-only counts over one day of reservations and waitlist entries."""

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    def daily_reservations(self, report_date: date) -> DailyReservationReport:
        with self._unit_of_work_factory() as uow:
            reservations = uow.reservations.list_for_date(report_date)

        by_status = {status: 0 for status in ReservationStatus}
        for reservation in reservations:
            by_status[reservation.status] += 1
        return DailyReservationReport(
            report_date=report_date,
            total=len(reservations),
            by_status=by_status,
            reservations=reservations,
        )

    def table_utilization(self, report_date: date) -> list[TableUtilizationData]:
        with self._unit_of_work_factory() as uow:
            tables = uow.tables.get_all()
            return [
                TableUtilizationData(
                    table_id=table.table_id,
                    table_number=table.table_number,
                    capacity=table.capacity,
                    reservation_count=uow.reservations.count_for_table_on_date(
                        table.table_id, report_date
                    ),
                )
                for table in tables
            ]

    def waitlist(self, report_date: date) -> WaitlistReport:
        with self._unit_of_work_factory() as uow:
            entries = uow.waitlist.list_active(report_date)

        total_wait = sum(entry.wait_time_minutes for entry in entries)
        average = total_wait / len(entries) if entries else 0.0
        return WaitlistReport(
            report_date=report_date,
            total_waiting=len(entries),
            average_wait_minutes=round(average, 1),
            entries=entries,
        )
