from __future__ import annotations

from datetime import date, datetime, time
from typing import Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from rrs.application.ports.repositories import WaitlistRepository
from rrs.domain.common.ids import CustomerId, WaitlistEntryId
from rrs.domain.waitlist.entities import WaitlistEntry, WaitlistStatus
from rrs.infrastructure.db.models.waitlist import WaitlistEntryModel


class SqlAlchemyWaitlistRepository(WaitlistRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, entry: WaitlistEntry) -> None:
        self._session.add(
            WaitlistEntryModel(
                id=str(entry.waitlist_id),
                customer_id=str(entry.customer_id),
                requested_date=entry.requested_date,
                requested_time=entry.requested_time,
                party_size=entry.party_size,
                status=entry.status.value,
                queue_position=entry.queue_position,
                wait_time_minutes=entry.wait_time_minutes,
                created_at=entry.created_at or datetime.now(),
            )
        )
        self._session.flush()

    def get(self, waitlist_id: WaitlistEntryId) -> WaitlistEntry | None:
        model = self._session.get(WaitlistEntryModel, str(waitlist_id))
        if model is None:
            return None
        return _to_domain(model)

    def get_for_update(self, waitlist_id: WaitlistEntryId) -> WaitlistEntry | None:
        statement = (
            select(WaitlistEntryModel)
            .where(WaitlistEntryModel.id == str(waitlist_id))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return _to_domain(model)

    def list_active(
        self,
        requested_date: date | None = None,
        requested_time: time | None = None,
    ) -> list[WaitlistEntry]:
        statement = select(WaitlistEntryModel).where(
            WaitlistEntryModel.status == WaitlistStatus.ACTIVE.value
        )
        if requested_date is not None:
            statement = statement.where(WaitlistEntryModel.requested_date == requested_date)
        if requested_time is not None:
            statement = statement.where(WaitlistEntryModel.requested_time == requested_time)
        statement = statement.order_by(
            WaitlistEntryModel.requested_date,
            WaitlistEntryModel.requested_time,
            WaitlistEntryModel.queue_position,
        )
        return [_to_domain(model) for model in self._session.execute(statement).scalars()]

    def list_for_customer(self, customer_id: CustomerId) -> list[WaitlistEntry]:
        statement = (
            select(WaitlistEntryModel)
            .where(WaitlistEntryModel.customer_id == str(customer_id))
            .order_by(WaitlistEntryModel.requested_date, WaitlistEntryModel.requested_time)
        )
        return [_to_domain(model) for model in self._session.execute(statement).scalars()]

    def set_status(self, waitlist_id: WaitlistEntryId, status: WaitlistStatus) -> None:
        statement = (
            update(WaitlistEntryModel)
            .where(WaitlistEntryModel.id == str(waitlist_id))
            .values(status=status.value)
        )
        self._session.execute(statement)

    def set_wait_time(self, waitlist_id: WaitlistEntryId, minutes: int) -> None:
        statement = (
            update(WaitlistEntryModel)
            .where(WaitlistEntryModel.id == str(waitlist_id))
            .values(wait_time_minutes=minutes)
        )
        self._session.execute(statement)

    def get_max_position_for_slot(self, requested_date: date, requested_time: time) -> int | None:
        statement = select(func.max(WaitlistEntryModel.queue_position)).where(
            WaitlistEntryModel.requested_date == requested_date,
            WaitlistEntryModel.requested_time == requested_time,
            WaitlistEntryModel.status == WaitlistStatus.ACTIVE.value,
        )
        return self._session.execute(statement).scalar_one_or_none()

    def delete(self, waitlist_id: WaitlistEntryId) -> None:
        statement = delete(WaitlistEntryModel).where(WaitlistEntryModel.id == str(waitlist_id))
        self._session.execute(statement)

    def renumber_active(self, assignments: Sequence[tuple[WaitlistEntryId, int]]) -> None:
        for waitlist_id, position in assignments:
            self._session.execute(
                update(WaitlistEntryModel)
                .where(WaitlistEntryModel.id == str(waitlist_id))
                .values(queue_position=position)
            )


def _to_domain(model: WaitlistEntryModel) -> WaitlistEntry:
    return WaitlistEntry(
        waitlist_id=WaitlistEntryId(model.id),
        customer_id=CustomerId(model.customer_id),
        requested_date=model.requested_date,
        requested_time=model.requested_time,
        party_size=model.party_size,
        status=WaitlistStatus.parse(model.status),
        queue_position=model.queue_position,
        wait_time_minutes=model.wait_time_minutes,
        created_at=model.created_at,
    )
