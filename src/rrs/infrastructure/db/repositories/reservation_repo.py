from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from rrs.application.ports.repositories import ReservationRepository
from rrs.domain.common.ids import CustomerId, ReservationId, TableId
from rrs.domain.reservation.entities import (
    ACTIVE_RESERVATION_STATUSES,
    Reservation,
    ReservationStatus,
)
from rrs.infrastructure.db.models.reservation import ReservationModel

_ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_RESERVATION_STATUSES]


class SqlAlchemyReservationRepository(ReservationRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, reservation: Reservation) -> None:
        self._session.add(
            ReservationModel(
                id=str(reservation.reservation_id),
                customer_id=str(reservation.customer_id),
                table_id=str(reservation.table_id),
                reservation_date=reservation.reservation_date,
                reservation_time=reservation.reservation_time,
                party_size=reservation.party_size,
                status=reservation.status.value,
                duration_minutes=reservation.duration_minutes,
                notes=reservation.notes,
                created_at=reservation.created_at or datetime.now(),
            )
        )
        self._session.flush()

    def get(self, reservation_id: ReservationId) -> Reservation | None:
        model = self._session.get(ReservationModel, str(reservation_id))
        if model is None:
            return None
        return _to_domain(model)

    def get_for_update(self, reservation_id: ReservationId) -> Reservation | None:
        statement = (
            select(ReservationModel)
            .where(ReservationModel.id == str(reservation_id))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return _to_domain(model)

    def list_for_customer(self, customer_id: CustomerId) -> list[Reservation]:
        statement = (
            select(ReservationModel)
            .where(ReservationModel.customer_id == str(customer_id))
            .order_by(ReservationModel.reservation_date, ReservationModel.reservation_time)
        )
        return [_to_domain(model) for model in self._session.execute(statement).scalars()]

    def list_active(self, from_date: date) -> list[Reservation]:
        statement = (
            select(ReservationModel)
            .where(
                ReservationModel.status.in_(_ACTIVE_STATUS_VALUES),
                ReservationModel.reservation_date >= from_date,
            )
            .order_by(ReservationModel.reservation_date, ReservationModel.reservation_time)
        )
        return [_to_domain(model) for model in self._session.execute(statement).scalars()]

    def list_for_date(self, on_date: date) -> list[Reservation]:
        statement = (
            select(ReservationModel)
            .where(ReservationModel.reservation_date == on_date)
            .order_by(ReservationModel.reservation_time, ReservationModel.table_id)
        )
        return [_to_domain(model) for model in self._session.execute(statement).scalars()]

    def list_active_for_table(
        self,
        table_id: TableId,
        dates: Sequence[date],
    ) -> list[Reservation]:
        statement = (
            select(ReservationModel)
            .where(
                ReservationModel.table_id == str(table_id),
                ReservationModel.reservation_date.in_(list(dates)),
                ReservationModel.status.in_(_ACTIVE_STATUS_VALUES),
            )
            .order_by(ReservationModel.reservation_date, ReservationModel.reservation_time)
        )
        return [_to_domain(model) for model in self._session.execute(statement).scalars()]

    def set_status(self, reservation_id: ReservationId, status: ReservationStatus) -> None:
        statement = (
            update(ReservationModel)
            .where(ReservationModel.id == str(reservation_id))
            .values(status=status.value)
        )
        self._session.execute(statement)

    def count_for_table_on_date(self, table_id: TableId, on_date: date) -> int:
        statement = select(func.count(ReservationModel.id)).where(
            ReservationModel.table_id == str(table_id),
            ReservationModel.reservation_date == on_date,
            ReservationModel.status != ReservationStatus.CANCELLED.value,
        )
        return int(self._session.execute(statement).scalar_one() or 0)


def _to_domain(model: ReservationModel) -> Reservation:
    return Reservation(
        reservation_id=ReservationId(model.id),
        customer_id=CustomerId(model.customer_id),
        table_id=TableId(model.table_id),
        reservation_date=model.reservation_date,
        reservation_time=model.reservation_time,
        party_size=model.party_size,
        status=ReservationStatus.parse(model.status),
        duration_minutes=model.duration_minutes,
        notes=model.notes,
        created_at=model.created_at,
    )
