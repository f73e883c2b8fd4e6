from __future__ import annotations

import os
from functools import lru_cache

from fastapi import Depends

from rrs.api.middleware.request_id import get_request_id
from rrs.application.ports.publisher import EventPublisher, NullEventPublisher
from rrs.application.ports.repositories import UnitOfWorkFactory
from rrs.application.use_cases.context import TraceContext
from rrs.application.use_cases.reports import ReservationReports
from rrs.application.use_cases.reservation_lifecycle import ReservationLifecycle
from rrs.application.use_cases.table_administration import TableAdministration
from rrs.application.use_cases.waitlist_queue import WaitlistQueue
from rrs.domain.waitlist.entities import DEFAULT_WAIT_MINUTES
from rrs.infrastructure.cache.redis_client import redis_configured
from rrs.infrastructure.db.unit_of_work import sql_unit_of_work_factory
from rrs.infrastructure.messaging.redis_publisher import RedisEventPublisher
from rrs.infrastructure.observability.otel import current_trace_id


def _default_wait_minutes() -> int:
    raw = os.getenv("RRS_WAITLIST_DEFAULT_WAIT_MINUTES")
    return int(raw) if raw else DEFAULT_WAIT_MINUTES


@lru_cache(maxsize=1)
def get_unit_of_work_factory() -> UnitOfWorkFactory:
    return sql_unit_of_work_factory()


def get_event_publisher() -> EventPublisher:
    if redis_configured():
        return RedisEventPublisher()
    return NullEventPublisher()


def get_waitlist_queue(
    unit_of_work_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> WaitlistQueue:
    return WaitlistQueue(
        unit_of_work_factory,
        publisher,
        default_wait_minutes=_default_wait_minutes(),
    )


def get_reservation_lifecycle(
    unit_of_work_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    publisher: EventPublisher = Depends(get_event_publisher),
    waitlist_queue: WaitlistQueue = Depends(get_waitlist_queue),
) -> ReservationLifecycle:
    return ReservationLifecycle(unit_of_work_factory, publisher, waitlist_queue)


def get_table_administration(
    unit_of_work_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> TableAdministration:
    return TableAdministration(unit_of_work_factory)


def get_reports(
    unit_of_work_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> ReservationReports:
    return ReservationReports(unit_of_work_factory)


def trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())
