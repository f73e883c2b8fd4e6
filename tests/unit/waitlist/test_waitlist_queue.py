from __future__ import annotations

import json
import random
import sys
from datetime import date, time
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from rrs.application.ports.publisher import WAITLIST_EVENTS_CHANNEL
from rrs.application.use_cases.waitlist_queue import WaitlistQueue
from rrs.domain.common.errors import InvalidTransitionError, NotFoundError, ValidationError
from rrs.domain.common.ids import CategoryId, CustomerId, TableId, WaitlistEntryId
from rrs.domain.table.entities import Table, TableCategory, TableStatus
from rrs.domain.waitlist.entities import WaitlistStatus

DAY = date(2030, 1, 1)
SEVEN = time(19, 0)


@pytest.fixture
def queue(uow_factory, publisher, clock) -> WaitlistQueue:
    return WaitlistQueue(uow_factory, publisher, default_wait_minutes=15, clock=clock)


def _join_many(queue: WaitlistQueue, count: int, at: time = SEVEN) -> list:
    return [queue.join(CustomerId(f"cus_{index}"), DAY, at, 2) for index in range(count)]


def _positions(queue: WaitlistQueue, at: time = SEVEN) -> list[tuple[str, int]]:
    return [(entry.customer_id, entry.queue_position) for entry in queue.list_active(DAY, at)]


def test_join_appends_at_next_position(queue) -> None:
    entries = _join_many(queue, 3)

    assert [entry.queue_position for entry in entries] == [1, 2, 3]
    assert all(entry.status == WaitlistStatus.ACTIVE for entry in entries)
    assert entries[0].waitlist_id.startswith("wtl_")
    assert entries[0].wait_time_minutes == 15


def test_each_slot_keeps_its_own_queue(queue) -> None:
    _join_many(queue, 2)

    other = queue.join(CustomerId("cus_late"), DAY, time(21, 0), 4)

    assert other.queue_position == 1


def test_join_takes_the_slot_lock(uow_factory, publisher, clock) -> None:
    units = []

    def factory():
        unit = uow_factory()
        units.append(unit)
        return unit

    WaitlistQueue(factory, publisher, clock=clock).join(CustomerId("cus_1"), DAY, SEVEN, 2)

    assert units[0].queue_locks == [(DAY, SEVEN)]


def test_join_rejects_empty_party(queue) -> None:
    with pytest.raises(ValidationError):
        queue.join(CustomerId("cus_1"), DAY, SEVEN, 0)


def test_remove_closes_the_gap(queue, store) -> None:
    first, second, third = _join_many(queue, 3)

    removed = queue.remove(second.waitlist_id)

    assert removed.waitlist_id == second.waitlist_id
    assert second.waitlist_id not in store.waitlist
    assert _positions(queue) == [("cus_0", 1), ("cus_2", 2)]


@pytest.mark.parametrize(
    "depart, status",
    [("seat", WaitlistStatus.SEATED), ("expire", WaitlistStatus.EXPIRED)],
)
def test_seat_and_expire_keep_history_and_renumber(queue, store, depart: str, status) -> None:
    first, second, third = _join_many(queue, 3)

    departed = getattr(queue, depart)(first.waitlist_id)

    assert departed.status == status
    assert store.waitlist[first.waitlist_id].status == status
    assert _positions(queue) == [("cus_1", 1), ("cus_2", 2)]


def test_departing_twice_is_invalid_transition(queue) -> None:
    entry = _join_many(queue, 1)[0]
    queue.seat(entry.waitlist_id)

    with pytest.raises(InvalidTransitionError):
        queue.expire(entry.waitlist_id)
    with pytest.raises(InvalidTransitionError):
        queue.remove(entry.waitlist_id)


def test_unknown_entry_is_not_found(queue) -> None:
    with pytest.raises(NotFoundError):
        queue.seat(WaitlistEntryId("wtl_missing"))
    with pytest.raises(NotFoundError):
        queue.get(WaitlistEntryId("wtl_missing"))


def test_positions_stay_contiguous_under_random_churn(queue) -> None:
    rng = random.Random(7)
    active = _join_many(queue, 5)
    joined = len(active)

    for _ in range(40):
        if active and rng.random() < 0.5:
            leaving = active.pop(rng.randrange(len(active)))
            getattr(queue, rng.choice(["seat", "expire", "remove"]))(leaving.waitlist_id)
        else:
            active.append(queue.join(CustomerId(f"cus_{joined}"), DAY, SEVEN, 2))
            joined += 1

        positions = [position for _, position in _positions(queue)]
        assert positions == list(range(1, len(active) + 1))

    expected_order = [entry.customer_id for entry in active]
    assert [customer for customer, _ in _positions(queue)] == expected_order


def test_set_wait_time(queue, store) -> None:
    entry = _join_many(queue, 1)[0]

    updated = queue.set_wait_time(entry.waitlist_id, 40)

    assert updated.wait_time_minutes == 40
    assert store.waitlist[entry.waitlist_id].wait_time_minutes == 40
    with pytest.raises(ValidationError):
        queue.set_wait_time(entry.waitlist_id, -1)


def test_list_for_customer(queue) -> None:
    queue.join(CustomerId("cus_a"), DAY, SEVEN, 2)
    queue.join(CustomerId("cus_b"), DAY, SEVEN, 2)
    queue.join(CustomerId("cus_a"), DAY, time(21, 0), 2)

    entries = queue.list_for_customer(CustomerId("cus_a"))

    assert len(entries) == 2
    assert {entry.customer_id for entry in entries} == {"cus_a"}


def test_capacity_released_announces_first_fitting_party(queue, publisher) -> None:
    queue.join(CustomerId("cus_big"), DAY, SEVEN, 8)
    fitting = queue.join(CustomerId("cus_pair"), DAY, SEVEN, 2)
    table = Table(
        table_id=TableId("tbl_4"),
        table_number="T4",
        capacity=4,
        status=TableStatus.AVAILABLE,
        category=TableCategory(CategoryId("cat_standard"), "Standard", 1, 20),
    )

    candidate = queue.capacity_released(table, DAY)

    assert candidate is not None
    assert candidate.waitlist_id == fitting.waitlist_id
    assert candidate.status == WaitlistStatus.ACTIVE
    channel, message = publisher.messages[-1]
    assert channel == WAITLIST_EVENTS_CHANNEL
    assert json.loads(message)["event_type"] == "waitlist.capacity_opened"


def test_capacity_released_without_fit_returns_none(queue, publisher) -> None:
    queue.join(CustomerId("cus_big"), DAY, SEVEN, 8)
    published = len(publisher.messages)
    table = Table(
        table_id=TableId("tbl_2"),
        table_number="T2",
        capacity=2,
        status=TableStatus.AVAILABLE,
        category=TableCategory(CategoryId("cat_small"), "Small", 1, 2),
    )

    assert queue.capacity_released(table, DAY) is None
    assert len(publisher.messages) == published


def test_departures_publish_events(queue, publisher) -> None:
    first, second = _join_many(queue, 2)
    queue.seat(first.waitlist_id)
    queue.remove(second.waitlist_id)

    event_types = [json.loads(message)["event_type"] for _, message in publisher.messages]

    assert event_types == [
        "waitlist.joined",
        "waitlist.joined",
        "waitlist.seated",
        "waitlist.removed",
    ]
