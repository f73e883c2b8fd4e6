from __future__ import annotations

import sys
from datetime import date, time
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from rrs.application.use_cases.reservation_lifecycle import ReservationLifecycle
from rrs.application.use_cases.table_administration import TableAdministration
from rrs.domain.common.errors import ConflictError, NotFoundError, ValidationError
from rrs.domain.common.ids import CategoryId, CustomerId, ManagerId, TableId
from rrs.domain.table.entities import TableCategory, TableStatus

DAY = date(2030, 1, 1)


@pytest.fixture
def admin(uow_factory, clock) -> TableAdministration:
    return TableAdministration(uow_factory, clock=clock)


def test_register_table(admin, store) -> None:
    table = admin.register(
        " T10 ",
        4,
        CategoryId("cat_standard"),
        location="Terrace",
        has_window=True,
        manager_id=ManagerId("mgr_1"),
    )

    assert table.table_id.startswith("tbl_")
    assert table.table_number == "T10"
    assert table.status == TableStatus.AVAILABLE
    assert table.last_modified_by == "mgr_1"
    assert store.tables[table.table_id].location == "Terrace"


def test_register_rejects_duplicate_number(admin, store) -> None:
    store.add_table("tbl_1", 4, number="T1")

    with pytest.raises(ConflictError):
        admin.register("T1", 4, CategoryId("cat_standard"))


def test_register_rejects_unknown_category(admin) -> None:
    with pytest.raises(NotFoundError):
        admin.register("T1", 4, CategoryId("cat_missing"))


def test_register_rejects_capacity_outside_category_band(admin, store) -> None:
    small = TableCategory(CategoryId("cat_small"), "Small", 1, 2)
    store.categories["cat_small"] = small

    with pytest.raises(ValidationError):
        admin.register("T1", 4, CategoryId("cat_small"))


def test_register_rejects_blank_number(admin) -> None:
    with pytest.raises(ValidationError):
        admin.register("   ", 4, CategoryId("cat_standard"))


def test_list_tables_sorted_by_number(admin, store) -> None:
    store.add_table("tbl_b", 4, number="T2")
    store.add_table("tbl_a", 2, number="T1")

    assert [table.table_number for table in admin.list_tables()] == ["T1", "T2"]
    assert [category.category_id for category in admin.list_categories()] == ["cat_standard"]


def test_set_status_records_manager(admin, store) -> None:
    store.add_table("tbl_1", 4)

    updated = admin.set_status(TableId("tbl_1"), TableStatus.MAINTENANCE, ManagerId("mgr_9"))

    assert updated.status == TableStatus.MAINTENANCE
    assert store.tables["tbl_1"].status == TableStatus.MAINTENANCE
    assert store.tables["tbl_1"].last_modified_by == "mgr_9"


def test_set_status_unknown_table(admin) -> None:
    with pytest.raises(NotFoundError):
        admin.set_status(TableId("tbl_missing"), TableStatus.OCCUPIED, ManagerId("mgr_1"))


def test_get_unknown_table(admin) -> None:
    with pytest.raises(NotFoundError):
        admin.get(TableId("tbl_missing"))


def test_check_availability_reports_conflicts(admin, store, uow_factory, clock) -> None:
    store.add_table("tbl_1", 4)
    lifecycle = ReservationLifecycle(uow_factory, clock=clock)
    booked = lifecycle.create(CustomerId("cus_1"), TableId("tbl_1"), DAY, time(18, 0), 2)

    clashing = admin.check_availability(TableId("tbl_1"), DAY, time(19, 0), 60)
    free = admin.check_availability(TableId("tbl_1"), DAY, time(20, 0), 60)

    assert [item.reservation_id for item in clashing] == [booked]
    assert free == []
    with pytest.raises(NotFoundError):
        admin.check_availability(TableId("tbl_missing"), DAY, time(20, 0))


def test_find_candidates(admin, store) -> None:
    store.add_table("tbl_6", 6)
    store.add_table("tbl_4", 4)
    store.add_table("tbl_2", 2)

    candidates = admin.find_candidates(3, DAY, time(18, 0))

    assert [table.table_id for table in candidates] == ["tbl_4", "tbl_6"]
