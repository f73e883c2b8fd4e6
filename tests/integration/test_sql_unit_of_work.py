from __future__ import annotations

import sys
from datetime import date, datetime, time
from pathlib import Path

import pytest
from sqlalchemy import Engine, text

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from rrs.application.use_cases.availability import AvailabilityChecker
from rrs.application.use_cases.table_allocation import TableAllocator
from rrs.domain.common.errors import InvalidStatusError, PersistenceError
from rrs.domain.common.ids import CustomerId, ReservationId, TableId, WaitlistEntryId
from rrs.domain.reservation.entities import Reservation, ReservationStatus
from rrs.domain.table.entities import TableStatus
from rrs.domain.waitlist.entities import WaitlistEntry, WaitlistStatus

DAY = date(2099, 6, 1)


def _reservation(reservation_id: str, table_id: str = "tbl_003", at: time = time(18, 0)) -> Reservation:
    return Reservation(
        reservation_id=ReservationId(reservation_id),
        customer_id=CustomerId("cus_1"),
        table_id=TableId(table_id),
        reservation_date=DAY,
        reservation_time=at,
        party_size=3,
        status=ReservationStatus.PENDING,
        created_at=datetime(2099, 5, 1, 9, 0),
    )


def test_committed_writes_are_visible_to_the_next_unit(uow_factory) -> None:
    with uow_factory() as uow:
        uow.reservations.add(_reservation("rsv_a"))
        uow.tables.set_status(TableId("tbl_003"), TableStatus.RESERVED, modified_by="cus_1")
        uow.commit()

    with uow_factory() as uow:
        stored = uow.reservations.get(ReservationId("rsv_a"))
        table = uow.tables.get(TableId("tbl_003"))

    assert stored is not None
    assert stored.reservation_time == time(18, 0)
    assert table is not None
    assert table.status == TableStatus.RESERVED
    assert table.category.category_id == "cat_standard"


def test_leaving_without_commit_discards_writes(uow_factory) -> None:
    with uow_factory() as uow:
        uow.reservations.add(_reservation("rsv_b"))
        uow.tables.set_status(TableId("tbl_003"), TableStatus.RESERVED, modified_by="cus_1")

    with uow_factory() as uow:
        assert uow.reservations.get(ReservationId("rsv_b")) is None
        assert uow.tables.get(TableId("tbl_003")).status == TableStatus.AVAILABLE


def test_error_inside_unit_rolls_back(uow_factory) -> None:
    with pytest.raises(RuntimeError):
        with uow_factory() as uow:
            uow.reservations.add(_reservation("rsv_c"))
            raise RuntimeError("boom")

    with uow_factory() as uow:
        assert uow.reservations.get(ReservationId("rsv_c")) is None


def test_store_errors_surface_as_persistence_error(uow_factory) -> None:
    with uow_factory() as uow:
        uow.reservations.add(_reservation("rsv_d"))
        uow.commit()

    with pytest.raises(PersistenceError):
        with uow_factory() as uow:
            uow.reservations.add(_reservation("rsv_d"))
            uow.commit()


def test_unknown_stored_status_is_reported(uow_factory, engine: Engine) -> None:
    with uow_factory() as uow:
        uow.reservations.add(_reservation("rsv_e"))
        uow.commit()
    with engine.begin() as connection:
        connection.execute(text("UPDATE reservations SET status = 'ON_HOLD' WHERE id = 'rsv_e'"))

    with pytest.raises(InvalidStatusError):
        with uow_factory() as uow:
            uow.reservations.get(ReservationId("rsv_e"))


def test_get_available_orders_by_capacity_and_leaves_overlap_to_the_checker(uow_factory) -> None:
    with uow_factory() as uow:
        uow.reservations.add(_reservation("rsv_f", table_id="tbl_003"))
        uow.commit()

    with uow_factory() as uow:
        tables = uow.tables.get_available(3)
        allocator = TableAllocator(uow.tables, AvailabilityChecker(uow.reservations))
        candidates = allocator.find_candidates(3, DAY, time(18, 30), 60)

    assert [table.table_id for table in tables] == ["tbl_003", "tbl_004", "tbl_005", "tbl_006"]
    assert [table.table_id for table in candidates] == ["tbl_004", "tbl_005", "tbl_006"]


def test_utilization_count_excludes_cancelled(uow_factory) -> None:
    with uow_factory() as uow:
        uow.reservations.add(_reservation("rsv_g", at=time(12, 0)))
        uow.reservations.add(_reservation("rsv_h", at=time(18, 0)))
        uow.reservations.set_status(ReservationId("rsv_h"), ReservationStatus.CANCELLED)
        uow.commit()

    with uow_factory() as uow:
        assert uow.reservations.count_for_table_on_date(TableId("tbl_003"), DAY) == 1
        assert [item.reservation_id for item in uow.reservations.list_for_date(DAY)] == [
            "rsv_g",
            "rsv_h",
        ]


def test_waitlist_renumber_and_delete(uow_factory) -> None:
    with uow_factory() as uow:
        for position in (1, 2, 3):
            uow.waitlist.add(
                WaitlistEntry(
                    waitlist_id=WaitlistEntryId(f"wtl_{position}"),
                    customer_id=CustomerId(f"cus_{position}"),
                    requested_date=DAY,
                    requested_time=time(19, 0),
                    party_size=2,
                    status=WaitlistStatus.ACTIVE,
                    queue_position=position,
                )
            )
        uow.commit()

    with uow_factory() as uow:
        assert uow.waitlist.get_max_position_for_slot(DAY, time(19, 0)) == 3
        uow.waitlist.delete(WaitlistEntryId("wtl_1"))
        uow.waitlist.renumber_active(
            [(WaitlistEntryId("wtl_2"), 1), (WaitlistEntryId("wtl_3"), 2)]
        )
        uow.commit()

    with uow_factory() as uow:
        active = uow.waitlist.list_active(DAY, time(19, 0))

    assert [(entry.waitlist_id, entry.queue_position) for entry in active] == [
        ("wtl_2", 1),
        ("wtl_3", 2),
    ]
