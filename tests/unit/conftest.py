from __future__ import annotations

import sys
import threading
from dataclasses import replace
from datetime import date, datetime, time
from pathlib import Path
from typing import Sequence

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from rrs.domain.common.errors import PersistenceError
from rrs.domain.common.ids import CategoryId, CustomerId, ReservationId, TableId, WaitlistEntryId
from rrs.domain.reservation.entities import Reservation, ReservationStatus
from rrs.domain.table.entities import Table, TableCategory, TableStatus
from rrs.domain.waitlist.entities import WaitlistEntry, WaitlistStatus

FIXED_NOW = datetime(2029, 12, 31, 12, 0)

STANDARD = TableCategory(
    category_id=CategoryId("cat_standard"),
    name="Standard",
    min_capacity=1,
    max_capacity=20,
)


class InMemoryStore:
    """Committed state shared by every fake unit of work."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.categories: dict[str, TableCategory] = {str(STANDARD.category_id): STANDARD}
        self.tables: dict[str, Table] = {}
        self.reservations: dict[str, Reservation] = {}
        self.waitlist: dict[str, WaitlistEntry] = {}
        self.fail_next_commit = False
        self.commits = 0

    def add_table(
        self,
        table_id: str,
        capacity: int,
        status: TableStatus = TableStatus.AVAILABLE,
        number: str | None = None,
    ) -> Table:
        table = Table(
            table_id=TableId(table_id),
            table_number=number or table_id.upper(),
            capacity=capacity,
            status=status,
            category=STANDARD,
        )
        self.tables[table_id] = table
        return table

    def add_reservation(self, reservation: Reservation) -> Reservation:
        self.reservations[str(reservation.reservation_id)] = reservation
        return reservation


class FakeTableRepository:
    def __init__(self, tables: dict[str, Table], categories: dict[str, TableCategory]) -> None:
        self._tables = tables
        self._categories = categories

    def get(self, table_id: TableId) -> Table | None:
        return self._tables.get(str(table_id))

    def get_for_update(self, table_id: TableId) -> Table | None:
        return self._tables.get(str(table_id))

    def get_all(self) -> list[Table]:
        return sorted(self._tables.values(), key=lambda table: table.table_number)

    def get_available(self, party_size: int) -> list[Table]:
        return [
            table
            for table in self._tables.values()
            if table.status == TableStatus.AVAILABLE and table.capacity >= party_size
        ]

    def set_status(self, table_id: TableId, status: TableStatus, modified_by: str | None) -> None:
        table = self._tables[str(table_id)]
        self._tables[str(table_id)] = table.with_status(status, modified_by, FIXED_NOW)

    def add(self, table: Table) -> None:
        self._tables[str(table.table_id)] = table

    def table_number_exists(self, table_number: str) -> bool:
        return any(table.table_number == table_number for table in self._tables.values())

    def get_category(self, category_id: CategoryId) -> TableCategory | None:
        return self._categories.get(str(category_id))

    def list_categories(self) -> list[TableCategory]:
        return list(self._categories.values())


class FakeReservationRepository:
    def __init__(self, reservations: dict[str, Reservation]) -> None:
        self._reservations = reservations

    def add(self, reservation: Reservation) -> None:
        self._reservations[str(reservation.reservation_id)] = reservation

    def get(self, reservation_id: ReservationId) -> Reservation | None:
        return self._reservations.get(str(reservation_id))

    def get_for_update(self, reservation_id: ReservationId) -> Reservation | None:
        return self._reservations.get(str(reservation_id))

    def list_for_customer(self, customer_id: CustomerId) -> list[Reservation]:
        return sorted(
            (item for item in self._reservations.values() if item.customer_id == customer_id),
            key=lambda item: (item.reservation_date, item.reservation_time),
        )

    def list_active(self, from_date: date) -> list[Reservation]:
        return sorted(
            (
                item
                for item in self._reservations.values()
                if item.is_active and item.reservation_date >= from_date
            ),
            key=lambda item: (item.reservation_date, item.reservation_time),
        )

    def list_for_date(self, on_date: date) -> list[Reservation]:
        return sorted(
            (item for item in self._reservations.values() if item.reservation_date == on_date),
            key=lambda item: item.reservation_time,
        )

    def list_active_for_table(self, table_id: TableId, dates: Sequence[date]) -> list[Reservation]:
        return [
            item
            for item in self._reservations.values()
            if item.table_id == table_id and item.reservation_date in dates and item.is_active
        ]

    def set_status(self, reservation_id: ReservationId, status: ReservationStatus) -> None:
        current = self._reservations[str(reservation_id)]
        self._reservations[str(reservation_id)] = replace(current, status=status)

    def count_for_table_on_date(self, table_id: TableId, on_date: date) -> int:
        return sum(
            1
            for item in self._reservations.values()
            if item.table_id == table_id
            and item.reservation_date == on_date
            and item.status != ReservationStatus.CANCELLED
        )


class FakeWaitlistRepository:
    def __init__(self, entries: dict[str, WaitlistEntry]) -> None:
        self._entries = entries

    def add(self, entry: WaitlistEntry) -> None:
        self._entries[str(entry.waitlist_id)] = entry

    def get(self, waitlist_id: WaitlistEntryId) -> WaitlistEntry | None:
        return self._entries.get(str(waitlist_id))

    def get_for_update(self, waitlist_id: WaitlistEntryId) -> WaitlistEntry | None:
        return self._entries.get(str(waitlist_id))

    def list_active(
        self,
        requested_date: date | None = None,
        requested_time: time | None = None,
    ) -> list[WaitlistEntry]:
        active = [
            entry
            for entry in self._entries.values()
            if entry.is_active
            and (requested_date is None or entry.requested_date == requested_date)
            and (requested_time is None or entry.requested_time == requested_time)
        ]
        return sorted(
            active,
            key=lambda entry: (entry.requested_date, entry.requested_time, entry.queue_position),
        )

    def list_for_customer(self, customer_id: CustomerId) -> list[WaitlistEntry]:
        return [entry for entry in self._entries.values() if entry.customer_id == customer_id]

    def set_status(self, waitlist_id: WaitlistEntryId, status: WaitlistStatus) -> None:
        current = self._entries[str(waitlist_id)]
        self._entries[str(waitlist_id)] = replace(current, status=status)

    def set_wait_time(self, waitlist_id: WaitlistEntryId, minutes: int) -> None:
        current = self._entries[str(waitlist_id)]
        self._entries[str(waitlist_id)] = replace(current, wait_time_minutes=minutes)

    def get_max_position_for_slot(self, requested_date: date, requested_time: time) -> int | None:
        positions = [entry.queue_position for entry in self.list_active(requested_date, requested_time)]
        return max(positions) if positions else None

    def delete(self, waitlist_id: WaitlistEntryId) -> None:
        del self._entries[str(waitlist_id)]

    def renumber_active(self, assignments: Sequence[tuple[WaitlistEntryId, int]]) -> None:
        for waitlist_id, position in assignments:
            current = self._entries[str(waitlist_id)]
            self._entries[str(waitlist_id)] = replace(current, queue_position=position)


class FakeUnitOfWork:
    """Serializable transaction over InMemoryStore: works on copies, swaps them in on commit."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.queue_locks: list[tuple[date, time]] = []

    def __enter__(self) -> FakeUnitOfWork:
        self._store.lock.acquire()
        self._tables = dict(self._store.tables)
        self._reservations = dict(self._store.reservations)
        self._waitlist = dict(self._store.waitlist)
        self.tables = FakeTableRepository(self._tables, self._store.categories)
        self.reservations = FakeReservationRepository(self._reservations)
        self.waitlist = FakeWaitlistRepository(self._waitlist)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._store.lock.release()

    def commit(self) -> None:
        if self._store.fail_next_commit:
            self._store.fail_next_commit = False
            raise PersistenceError("record store commit failed: simulated outage")
        self._store.tables = self._tables
        self._store.reservations = self._reservations
        self._store.waitlist = self._waitlist
        self._store.commits += 1

    def rollback(self) -> None:
        return None

    def lock_waitlist_queue(self, requested_date: date, requested_time: time) -> None:
        self.queue_locks.append((requested_date, requested_time))


class RecordingPublisher:
    def __init__(self, fail: bool = False) -> None:
        self.messages: list[tuple[str, str]] = []
        self._fail = fail

    def publish(self, channel: str, message: str) -> None:
        if self._fail:
            raise ConnectionError("redis unavailable")
        self.messages.append((channel, message))


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def uow_factory(store: InMemoryStore):
    return lambda: FakeUnitOfWork(store)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def failing_publisher() -> RecordingPublisher:
    return RecordingPublisher(fail=True)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW
