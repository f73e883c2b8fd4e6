from __future__ import annotations

import json
from datetime import date, datetime, time
from typing import Any
from uuid import uuid4

from rrs.application.use_cases.context import TraceContext
from rrs.domain.reservation.entities import Reservation
from rrs.domain.table.entities import Table
from rrs.domain.waitlist.entities import WaitlistEntry

CAPACITY_OPENED = "waitlist.capacity_opened"


def _slot(on_date: date, at_time: time) -> dict[str, str]:
    return {"date": on_date.isoformat(), "time": at_time.isoformat(timespec="minutes")}


def reservation_payload(reservation: Reservation) -> dict[str, Any]:
    return {
        "reservationId": str(reservation.reservation_id),
        "customerId": str(reservation.customer_id),
        "tableId": str(reservation.table_id),
        **_slot(reservation.reservation_date, reservation.reservation_time),
        "partySize": reservation.party_size,
        "durationMinutes": reservation.duration_minutes,
        "status": reservation.status.value,
    }


def waitlist_payload(entry: WaitlistEntry) -> dict[str, Any]:
    return {
        "waitlistId": str(entry.waitlist_id),
        "customerId": str(entry.customer_id),
        **_slot(entry.requested_date, entry.requested_time),
        "partySize": entry.party_size,
        "queuePosition": entry.queue_position,
        "status": entry.status.value,
    }


def capacity_opened_payload(table: Table, candidate: WaitlistEntry) -> dict[str, Any]:
    return {
        "tableId": str(table.table_id),
        "tableNumber": table.table_number,
        "capacity": table.capacity,
        "categoryId": str(table.category.category_id),
        "candidateWaitlistId": str(candidate.waitlist_id),
        "candidatePartySize": candidate.party_size,
        "date": candidate.requested_date.isoformat(),
    }


def serialize_event(
    event_type: str,
    payload: dict[str, Any],
    *,
    occurred_at: datetime,
    trace_ctx: TraceContext,
) -> str:
    """Compact JSON envelope published on the reservation and waitlist channels."""
    return json.dumps(
        {
            "event_id": str(uuid4()),
            "event_type": event_type,
            "occurred_at": occurred_at.isoformat(),
            "request_id": trace_ctx.request_id,
            "trace_id": trace_ctx.trace_id,
            "payload": payload,
        },
        separators=(",", ":"),
        ensure_ascii=False,
    )
