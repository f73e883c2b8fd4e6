from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time
from typing import Callable
from uuid import uuid4

from rrs.application.mappers.event_envelope import (
    CAPACITY_OPENED,
    capacity_opened_payload,
    serialize_event,
    waitlist_payload,
)
from rrs.application.metrics.reservation_lifecycle import (
    record_waitlist_departure,
    record_waitlist_join,
    record_waitlist_queue_size,
)
from rrs.application.ports.publisher import (
    WAITLIST_EVENTS_CHANNEL,
    EventPublisher,
    NullEventPublisher,
)
from rrs.application.ports.repositories import UnitOfWork, UnitOfWorkFactory
from rrs.application.use_cases.context import NO_TRACE, TraceContext
from rrs.application.use_cases.publishing import publish_after_commit
from rrs.domain.common.errors import NotFoundError, ValidationError
from rrs.domain.common.ids import CustomerId, WaitlistEntryId
from rrs.domain.common.window import ensure_wall_clock
from rrs.domain.table.entities import Table
from rrs.domain.waitlist.entities import (
    DEFAULT_WAIT_MINUTES,
    WaitlistEntry,
    WaitlistStatus,
    next_queue_position,
    renumber,
)

logger = logging.getLogger(__name__)

_REMOVED = "REMOVED"


def _slot_label(requested_date: date, requested_time: time) -> str:
    return f"{requested_date.isoformat()}T{requested_time.isoformat(timespec='minutes')}"


class WaitlistQueue:
    """Per-slot waitlist queues keyed by requested (date, time).

    Every write takes the slot's queue lock first, so position assignment on
    join and renumbering on departure never interleave.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        publisher: EventPublisher | None = None,
        *,
        default_wait_minutes: int = DEFAULT_WAIT_MINUTES,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._publisher = publisher or NullEventPublisher()
        self._default_wait_minutes = default_wait_minutes
        self._clock = clock

    def join(
        self,
        customer_id: CustomerId,
        requested_date: date,
        requested_time: time,
        party_size: int,
        trace_ctx: TraceContext = NO_TRACE,
    ) -> WaitlistEntry:
        if party_size <= 0:
            raise ValidationError("party size must be greater than 0")
        ensure_wall_clock(requested_time)

        now = self._clock()
        with self._unit_of_work_factory() as uow:
            uow.lock_waitlist_queue(requested_date, requested_time)
            highest = uow.waitlist.get_max_position_for_slot(requested_date, requested_time)
            entry = WaitlistEntry(
                waitlist_id=WaitlistEntryId(f"wtl_{uuid4().hex[:12]}"),
                customer_id=customer_id,
                requested_date=requested_date,
                requested_time=requested_time,
                party_size=party_size,
                status=WaitlistStatus.ACTIVE,
                queue_position=next_queue_position(highest),
                wait_time_minutes=self._default_wait_minutes,
                created_at=now,
            )
            uow.waitlist.add(entry)
            uow.commit()

        record_waitlist_join()
        record_waitlist_queue_size(
            _slot_label(requested_date, requested_time), entry.queue_position
        )
        logger.info(
            "waitlist_joined",
            extra={"waitlist_id": str(entry.waitlist_id), "position": entry.queue_position},
        )
        self._publish("waitlist.joined", entry, trace_ctx)
        return entry

    def seat(
        self, waitlist_id: WaitlistEntryId, trace_ctx: TraceContext = NO_TRACE
    ) -> WaitlistEntry:
        return self._depart(waitlist_id, WaitlistStatus.SEATED, trace_ctx)

    def expire(
        self, waitlist_id: WaitlistEntryId, trace_ctx: TraceContext = NO_TRACE
    ) -> WaitlistEntry:
        return self._depart(waitlist_id, WaitlistStatus.EXPIRED, trace_ctx)

    def remove(
        self, waitlist_id: WaitlistEntryId, trace_ctx: TraceContext = NO_TRACE
    ) -> WaitlistEntry:
        return self._depart(waitlist_id, _REMOVED, trace_ctx)

    def set_wait_time(self, waitlist_id: WaitlistEntryId, minutes: int) -> WaitlistEntry:
        if minutes < 0:
            raise ValidationError("wait time cannot be negative")
        with self._unit_of_work_factory() as uow:
            entry = _require_entry(uow, waitlist_id, for_update=True)
            uow.waitlist.set_wait_time(waitlist_id, minutes)
            uow.commit()
        return replace(entry, wait_time_minutes=minutes)

    def get(self, waitlist_id: WaitlistEntryId) -> WaitlistEntry:
        with self._unit_of_work_factory() as uow:
            return _require_entry(uow, waitlist_id)

    def list_active(
        self,
        requested_date: date | None = None,
        requested_time: time | None = None,
    ) -> list[WaitlistEntry]:
        if requested_time is not None:
            ensure_wall_clock(requested_time)
        with self._unit_of_work_factory() as uow:
            return uow.waitlist.list_active(requested_date, requested_time)

    def list_for_customer(self, customer_id: CustomerId) -> list[WaitlistEntry]:
        with self._unit_of_work_factory() as uow:
            return uow.waitlist.list_for_customer(customer_id)

    def capacity_released(
        self,
        table: Table,
        on_date: date,
        trace_ctx: TraceContext = NO_TRACE,
    ) -> WaitlistEntry | None:
        """Find the first waiting party on ``on_date`` that fits the freed table.

        Nobody is seated here; the candidate is announced and returned.
        """
        with self._unit_of_work_factory() as uow:
            waiting = uow.waitlist.list_active(on_date)

        candidate = next(
            (entry for entry in waiting if table.can_accommodate(entry.party_size)),
            None,
        )
        if candidate is None:
            return None

        logger.info(
            "waitlist_capacity_opened",
            extra={"table_id": str(table.table_id), "waitlist_id": str(candidate.waitlist_id)},
        )
        message = serialize_event(
            CAPACITY_OPENED,
            capacity_opened_payload(table, candidate),
            occurred_at=self._clock(),
            trace_ctx=trace_ctx,
        )
        publish_after_commit(self._publisher, WAITLIST_EVENTS_CHANNEL, message)
        return candidate

    def _depart(
        self,
        waitlist_id: WaitlistEntryId,
        outcome: WaitlistStatus | str,
        trace_ctx: TraceContext,
    ) -> WaitlistEntry:
        with self._unit_of_work_factory() as uow:
            located = _require_entry(uow, waitlist_id)
            uow.lock_waitlist_queue(located.requested_date, located.requested_time)
            entry = _require_entry(uow, waitlist_id, for_update=True)

            if outcome == WaitlistStatus.SEATED:
                departed = entry.seat()
                uow.waitlist.set_status(waitlist_id, departed.status)
            elif outcome == WaitlistStatus.EXPIRED:
                departed = entry.expire()
                uow.waitlist.set_status(waitlist_id, departed.status)
            else:
                entry.ensure_active("remove")
                departed = entry
                uow.waitlist.delete(waitlist_id)

            remaining = [
                queued
                for queued in uow.waitlist.list_active(entry.requested_date, entry.requested_time)
                if queued.waitlist_id != waitlist_id
            ]
            uow.waitlist.renumber_active(renumber(remaining))
            uow.commit()

        outcome_label = outcome.value if isinstance(outcome, WaitlistStatus) else outcome
        record_waitlist_departure(outcome_label)
        record_waitlist_queue_size(
            _slot_label(entry.requested_date, entry.requested_time), len(remaining)
        )
        logger.info(
            "waitlist_departed",
            extra={"waitlist_id": str(waitlist_id), "status": outcome_label},
        )
        self._publish(f"waitlist.{outcome_label.lower()}", departed, trace_ctx)
        return departed

    def _publish(self, event_type: str, entry: WaitlistEntry, trace_ctx: TraceContext) -> None:
        message = serialize_event(
            event_type,
            waitlist_payload(entry),
            occurred_at=self._clock(),
            trace_ctx=trace_ctx,
        )
        publish_after_commit(self._publisher, WAITLIST_EVENTS_CHANNEL, message)


def _require_entry(
    uow: UnitOfWork,
    waitlist_id: WaitlistEntryId,
    *,
    for_update: bool = False,
) -> WaitlistEntry:
    if for_update:
        entry = uow.waitlist.get_for_update(waitlist_id)
    else:
        entry = uow.waitlist.get(waitlist_id)
    if entry is None:
        raise NotFoundError(f"waitlist entry {waitlist_id} not found")
    return entry
