from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from types import TracebackType
from typing import Callable, Protocol, Sequence

from rrs.domain.common.ids import CategoryId, CustomerId, ReservationId, TableId, WaitlistEntryId
from rrs.domain.reservation.entities import Reservation, ReservationStatus
from rrs.domain.table.entities import Table, TableCategory, TableStatus
from rrs.domain.waitlist.entities import WaitlistEntry, WaitlistStatus


class TableRepository(Protocol):
    def get(self, table_id: TableId) -> Table | None: ...

    def get_for_update(self, table_id: TableId) -> Table | None: ...

    def get_all(self) -> list[Table]: ...

    def get_available(self, party_size: int) -> list[Table]: ...

    def set_status(self, table_id: TableId, status: TableStatus, modified_by: str | None) -> None: ...

    def add(self, table: Table) -> None: ...

    def table_number_exists(self, table_number: str) -> bool: ...

    def get_category(self, category_id: CategoryId) -> TableCategory | None: ...

    def list_categories(self) -> list[TableCategory]: ...


class ReservationRepository(Protocol):
    def add(self, reservation: Reservation) -> None: ...

    def get(self, reservation_id: ReservationId) -> Reservation | None: ...

    def get_for_update(self, reservation_id: ReservationId) -> Reservation | None: ...

    def list_for_customer(self, customer_id: CustomerId) -> list[Reservation]: ...

    def list_active(self, from_date: date) -> list[Reservation]: ...

    def list_for_date(self, on_date: date) -> list[Reservation]: ...

    def list_active_for_table(
        self,
        table_id: TableId,
        dates: Sequence[date],
    ) -> list[Reservation]: ...

    def set_status(self, reservation_id: ReservationId, status: ReservationStatus) -> None: ...

    def count_for_table_on_date(self, table_id: TableId, on_date: date) -> int: ...


class WaitlistRepository(Protocol):
    def add(self, entry: WaitlistEntry) -> None: ...

    def get(self, waitlist_id: WaitlistEntryId) -> WaitlistEntry | None: ...

    def get_for_update(self, waitlist_id: WaitlistEntryId) -> WaitlistEntry | None: ...

    def list_active(
        self,
        requested_date: date | None = None,
        requested_time: time | None = None,
    ) -> list[WaitlistEntry]: ...

    def list_for_customer(self, customer_id: CustomerId) -> list[WaitlistEntry]: ...

    def set_status(self, waitlist_id: WaitlistEntryId, status: WaitlistStatus) -> None: ...

    def set_wait_time(self, waitlist_id: WaitlistEntryId, minutes: int) -> None: ...

    def get_max_position_for_slot(self, requested_date: date, requested_time: time) -> int | None: ...

    def delete(self, waitlist_id: WaitlistEntryId) -> None: ...

    def renumber_active(self, assignments: Sequence[tuple[WaitlistEntryId, int]]) -> None: ...


class UnitOfWork(Protocol):
    """One store transaction. Leaving the block without ``commit()`` rolls back."""

    tables: TableRepository
    reservations: ReservationRepository
    waitlist: WaitlistRepository

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def lock_waitlist_queue(self, requested_date: date, requested_time: time) -> None: ...


UnitOfWorkFactory = Callable[[], UnitOfWork]


@dataclass(frozen=True)
class TableUtilizationData:
    table_id: TableId
    table_number: str
    capacity: int
    reservation_count: int
