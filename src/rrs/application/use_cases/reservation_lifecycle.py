from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable
from uuid import uuid4

from rrs.application.mappers.event_envelope import reservation_payload, serialize_event
from rrs.application.metrics.reservation_lifecycle import (
    record_reservation_created,
    record_reservation_rejected,
    record_table_released,
    record_transition,
)
from rrs.application.ports.publisher import (
    RESERVATION_EVENTS_CHANNEL,
    EventPublisher,
    NullEventPublisher,
)
from rrs.application.ports.repositories import UnitOfWork, UnitOfWorkFactory
from rrs.application.use_cases.availability import AvailabilityChecker
from rrs.application.use_cases.context import NO_TRACE, TraceContext
from rrs.application.use_cases.publishing import publish_after_commit
from rrs.application.use_cases.table_allocation import TableAllocator
from rrs.application.use_cases.waitlist_queue import WaitlistQueue
from rrs.domain.common.errors import ConflictError, NotFoundError, ReservationError, ValidationError
from rrs.domain.common.ids import CustomerId, ReservationId, TableId
from rrs.domain.reservation.entities import (
    DEFAULT_DURATION_MINUTES,
    Reservation,
    create_reservation,
    validate_booking_request,
)
from rrs.domain.table.entities import Table, TableStatus

logger = logging.getLogger(__name__)


class ReservationLifecycle:
    """Creates reservations and drives their status transitions.

    Each operation runs in a single unit of work: the reservation write and
    the paired table status write commit together or not at all.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        publisher: EventPublisher | None = None,
        waitlist_queue: WaitlistQueue | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._publisher = publisher or NullEventPublisher()
        self._waitlist_queue = waitlist_queue
        self._clock = clock

    def create(
        self,
        customer_id: CustomerId,
        table_id: TableId,
        reservation_date: date,
        reservation_time: time,
        party_size: int,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
        notes: str | None = None,
        *,
        confirmed: bool = False,
        trace_ctx: TraceContext = NO_TRACE,
    ) -> ReservationId:
        now = self._clock()
        self._validate(reservation_date, reservation_time, party_size, duration_minutes, now)

        with self._unit_of_work_factory() as uow:
            table = uow.tables.get_for_update(table_id)
            if table is None:
                raise NotFoundError(f"table {table_id} not found")
            reservation = self._reserve(
                uow,
                table,
                customer_id=customer_id,
                reservation_date=reservation_date,
                reservation_time=reservation_time,
                party_size=party_size,
                duration_minutes=duration_minutes,
                notes=notes,
                confirmed=confirmed,
                now=now,
            )
            uow.commit()

        self._after_create(reservation, trace_ctx)
        return reservation.reservation_id

    def book(
        self,
        customer_id: CustomerId,
        reservation_date: date,
        reservation_time: time,
        party_size: int,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
        notes: str | None = None,
        *,
        confirmed: bool = False,
        trace_ctx: TraceContext = NO_TRACE,
    ) -> ReservationId:
        """Reserve the tightest-fitting free table for the party."""
        now = self._clock()
        self._validate(reservation_date, reservation_time, party_size, duration_minutes, now)

        with self._unit_of_work_factory() as uow:
            allocator = TableAllocator(uow.tables, AvailabilityChecker(uow.reservations))
            candidates = allocator.find_candidates(
                party_size, reservation_date, reservation_time, duration_minutes
            )
            reservation: Reservation | None = None
            for candidate in candidates:
                table = uow.tables.get_for_update(candidate.table_id)
                if table is None or not table.is_available:
                    continue
                try:
                    reservation = self._reserve(
                        uow,
                        table,
                        customer_id=customer_id,
                        reservation_date=reservation_date,
                        reservation_time=reservation_time,
                        party_size=party_size,
                        duration_minutes=duration_minutes,
                        notes=notes,
                        confirmed=confirmed,
                        now=now,
                    )
                except ConflictError:
                    continue
                break

            if reservation is None:
                record_reservation_rejected("no_capacity")
                raise ConflictError(
                    f"no table available for a party of {party_size} on "
                    f"{reservation_date.isoformat()} at "
                    f"{reservation_time.isoformat(timespec='minutes')}"
                )
            uow.commit()

        self._after_create(reservation, trace_ctx)
        return reservation.reservation_id

    def confirm(
        self,
        reservation_id: ReservationId,
        trace_ctx: TraceContext = NO_TRACE,
    ) -> Reservation:
        return self._transition(reservation_id, "confirm", None, trace_ctx)

    def complete(
        self,
        reservation_id: ReservationId,
        modified_by: str | None = None,
        trace_ctx: TraceContext = NO_TRACE,
    ) -> Reservation:
        return self._transition(reservation_id, "complete", modified_by, trace_ctx)

    def cancel(
        self,
        reservation_id: ReservationId,
        modified_by: str | None = None,
        trace_ctx: TraceContext = NO_TRACE,
    ) -> Reservation:
        return self._transition(reservation_id, "cancel", modified_by, trace_ctx)

    def get(self, reservation_id: ReservationId) -> Reservation:
        with self._unit_of_work_factory() as uow:
            reservation = uow.reservations.get(reservation_id)
        if reservation is None:
            raise NotFoundError(f"reservation {reservation_id} not found")
        return reservation

    def list_for_customer(self, customer_id: CustomerId) -> list[Reservation]:
        with self._unit_of_work_factory() as uow:
            return uow.reservations.list_for_customer(customer_id)

    def list_active(self, from_date: date | None = None) -> list[Reservation]:
        with self._unit_of_work_factory() as uow:
            return uow.reservations.list_active(from_date or self._clock().date())

    def list_for_date(self, on_date: date) -> list[Reservation]:
        with self._unit_of_work_factory() as uow:
            return uow.reservations.list_for_date(on_date)

    def _validate(
        self,
        reservation_date: date,
        reservation_time: time,
        party_size: int,
        duration_minutes: int,
        now: datetime,
    ) -> None:
        try:
            validate_booking_request(
                reservation_date, reservation_time, party_size, duration_minutes, now
            )
        except ValidationError:
            record_reservation_rejected("validation")
            raise

    def _reserve(
        self,
        uow: UnitOfWork,
        table: Table,
        *,
        customer_id: CustomerId,
        reservation_date: date,
        reservation_time: time,
        party_size: int,
        duration_minutes: int,
        notes: str | None,
        confirmed: bool,
        now: datetime,
    ) -> Reservation:
        if not table.can_accommodate(party_size):
            record_reservation_rejected("capacity")
            raise ValidationError(
                f"party size {party_size} exceeds capacity {table.capacity} "
                f"of table {table.table_id}"
            )
        if table.status == TableStatus.MAINTENANCE:
            record_reservation_rejected("maintenance")
            raise ConflictError(f"table {table.table_id} is under maintenance")

        checker = AvailabilityChecker(uow.reservations)
        if not checker.is_available(
            table.table_id, reservation_date, reservation_time, duration_minutes
        ):
            record_reservation_rejected("overlap")
            raise ConflictError(
                f"table {table.table_id} is not available on {reservation_date.isoformat()} "
                f"at {reservation_time.isoformat(timespec='minutes')} "
                f"for {duration_minutes} minutes"
            )

        reservation = create_reservation(
            reservation_id=ReservationId(f"rsv_{uuid4().hex[:12]}"),
            customer_id=customer_id,
            table_id=table.table_id,
            reservation_date=reservation_date,
            reservation_time=reservation_time,
            party_size=party_size,
            now=now,
            duration_minutes=duration_minutes,
            notes=notes,
            confirmed=confirmed,
        )
        uow.reservations.add(reservation)
        uow.tables.set_status(table.table_id, TableStatus.RESERVED, modified_by=str(customer_id))
        return reservation

    def _after_create(self, reservation: Reservation, trace_ctx: TraceContext) -> None:
        record_reservation_created(reservation.status)
        logger.info(
            "reservation_created",
            extra={
                "reservation_id": str(reservation.reservation_id),
                "table_id": str(reservation.table_id),
                "status": reservation.status.value,
            },
        )
        message = serialize_event(
            "reservation.created",
            reservation_payload(reservation),
            occurred_at=self._clock(),
            trace_ctx=trace_ctx,
        )
        publish_after_commit(self._publisher, RESERVATION_EVENTS_CHANNEL, message)

    def _transition(
        self,
        reservation_id: ReservationId,
        action: str,
        modified_by: str | None,
        trace_ctx: TraceContext,
    ) -> Reservation:
        with self._unit_of_work_factory() as uow:
            current = uow.reservations.get_for_update(reservation_id)
            if current is None:
                raise NotFoundError(f"reservation {reservation_id} not found")

            updated: Reservation = getattr(current, action)()
            uow.reservations.set_status(reservation_id, updated.status)

            released: Table | None = None
            if not updated.is_active:
                released = uow.tables.get_for_update(current.table_id)
                if released is None:
                    raise NotFoundError(f"table {current.table_id} not found")
                uow.tables.set_status(
                    released.table_id, TableStatus.AVAILABLE, modified_by=modified_by
                )
            uow.commit()

        record_transition(current.status, updated.status)
        logger.info(
            "reservation_status_changed",
            extra={"reservation_id": str(reservation_id), "status": updated.status.value},
        )
        message = serialize_event(
            f"reservation.{updated.status.value.lower()}",
            reservation_payload(updated),
            occurred_at=self._clock(),
            trace_ctx=trace_ctx,
        )
        publish_after_commit(self._publisher, RESERVATION_EVENTS_CHANNEL, message)

        if released is not None:
            record_table_released()
            self._signal_capacity(released, updated.reservation_date, trace_ctx)
        return updated

    def _signal_capacity(self, table: Table, on_date: date, trace_ctx: TraceContext) -> None:
        if self._waitlist_queue is None:
            return
        try:
            self._waitlist_queue.capacity_released(table, on_date, trace_ctx)
        except ReservationError:
            logger.exception("waitlist_capacity_signal_failed", extra={"table_id": str(table.table_id)})
