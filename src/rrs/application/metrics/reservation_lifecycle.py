from __future__ import annotations

from prometheus_client import Counter, Gauge

from rrs.domain.reservation.entities import ReservationStatus
from rrs.domain.table.entities import TableStatus
from rrs.domain.waitlist.entities import WaitlistStatus

RESERVATIONS_CREATED_TOTAL = Counter(
    "rrs_reservations_created_total",
    "Total number of reservations created by initial status.",
    ["status"],
)

RESERVATION_TRANSITION_TOTAL = Counter(
    "rrs_reservation_transition_total",
    "Total number of reservation lifecycle transitions.",
    ["from", "to"],
)

RESERVATION_REJECTED_TOTAL = Counter(
    "rrs_reservation_rejected_total",
    "Total number of reservation requests rejected before persisting.",
    ["reason"],
)

TABLES_RELEASED_TOTAL = Counter(
    "rrs_tables_released_total",
    "Total number of tables freed by a reservation leaving the active states.",
)

TABLE_STATUS_CHANGES_TOTAL = Counter(
    "rrs_table_status_changes_total",
    "Total number of explicit table status changes.",
    ["status"],
)

WAITLIST_JOINS_TOTAL = Counter(
    "rrs_waitlist_joins_total",
    "Total number of parties added to the waitlist.",
)

WAITLIST_DEPARTURES_TOTAL = Counter(
    "rrs_waitlist_departures_total",
    "Total number of waitlist entries that left the active queue.",
    ["outcome"],
)

WAITLIST_QUEUE_SIZE = Gauge(
    "rrs_waitlist_queue_size",
    "Number of active entries in the most recently touched waitlist queue.",
    ["slot"],
)


def record_reservation_created(status: ReservationStatus) -> None:
    RESERVATIONS_CREATED_TOTAL.labels(status=status.value).inc()


def record_transition(from_status: ReservationStatus, to_status: ReservationStatus) -> None:
    RESERVATION_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_reservation_rejected(reason: str) -> None:
    RESERVATION_REJECTED_TOTAL.labels(reason=reason).inc()


def record_table_released() -> None:
    TABLES_RELEASED_TOTAL.inc()


def record_table_status_change(status: TableStatus) -> None:
    TABLE_STATUS_CHANGES_TOTAL.labels(status=status.value).inc()


def record_waitlist_join() -> None:
    WAITLIST_JOINS_TOTAL.inc()


def record_waitlist_departure(outcome: WaitlistStatus | str) -> None:
    label = outcome.value if isinstance(outcome, WaitlistStatus) else outcome
    WAITLIST_DEPARTURES_TOTAL.labels(outcome=label).inc()


def record_waitlist_queue_size(slot: str, size: int) -> None:
    WAITLIST_QUEUE_SIZE.labels(slot=slot).set(size)
