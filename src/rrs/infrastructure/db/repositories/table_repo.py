from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from rrs.application.ports.repositories import TableRepository
from rrs.domain.common.ids import CategoryId, TableId
from rrs.domain.table.entities import Table, TableCategory, TableStatus
from rrs.infrastructure.db.models.table import TableCategoryModel, TableModel


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, table_id: TableId) -> Table | None:
        model = self._session.get(TableModel, str(table_id))
        if model is None:
            return None
        return _to_domain(model)

    def get_for_update(self, table_id: TableId) -> Table | None:
        statement = (
            select(TableModel)
            .where(TableModel.id == str(table_id))
            .with_for_update(of=TableModel)
            .execution_options(populate_existing=True)
        )
        model = self._session.execute(statement).unique().scalar_one_or_none()
        if model is None:
            return None
        return _to_domain(model)

    def get_all(self) -> list[Table]:
        statement = select(TableModel).order_by(TableModel.table_number)
        return [_to_domain(model) for model in self._session.execute(statement).unique().scalars()]

    def get_available(self, party_size: int) -> list[Table]:
        statement = (
            select(TableModel)
            .where(
                TableModel.capacity >= party_size,
                TableModel.status == TableStatus.AVAILABLE.value,
            )
            .order_by(TableModel.capacity, TableModel.id)
        )
        return [_to_domain(model) for model in self._session.execute(statement).unique().scalars()]

    def set_status(self, table_id: TableId, status: TableStatus, modified_by: str | None) -> None:
        statement = (
            update(TableModel)
            .where(TableModel.id == str(table_id))
            .values(
                status=status.value,
                last_modified_by=modified_by,
                last_modified_at=datetime.now(),
            )
        )
        self._session.execute(statement)

    def add(self, table: Table) -> None:
        self._session.add(
            TableModel(
                id=str(table.table_id),
                table_number=table.table_number,
                category_id=str(table.category.category_id),
                capacity=table.capacity,
                status=table.status.value,
                location=table.location,
                has_window=table.has_window,
                is_private=table.is_private,
                last_modified_by=table.last_modified_by,
                last_modified_at=table.last_modified_at,
            )
        )
        self._session.flush()

    def table_number_exists(self, table_number: str) -> bool:
        statement = select(TableModel.id).where(TableModel.table_number == table_number).limit(1)
        return self._session.execute(statement).scalar_one_or_none() is not None

    def get_category(self, category_id: CategoryId) -> TableCategory | None:
        model = self._session.get(TableCategoryModel, str(category_id))
        if model is None:
            return None
        return _category_to_domain(model)

    def list_categories(self) -> list[TableCategory]:
        statement = select(TableCategoryModel).order_by(TableCategoryModel.min_capacity)
        return [_category_to_domain(model) for model in self._session.execute(statement).scalars()]


def _category_to_domain(model: TableCategoryModel) -> TableCategory:
    return TableCategory(
        category_id=CategoryId(model.id),
        name=model.name,
        min_capacity=model.min_capacity,
        max_capacity=model.max_capacity,
        description=model.description,
    )


def _to_domain(model: TableModel) -> Table:
    return Table(
        table_id=TableId(model.id),
        table_number=model.table_number,
        capacity=model.capacity,
        status=TableStatus.parse(model.status),
        category=_category_to_domain(model.category),
        location=model.location,
        has_window=model.has_window,
        is_private=model.is_private,
        last_modified_by=model.last_modified_by,
        last_modified_at=model.last_modified_at,
    )
