from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from rrs.api.dependencies import get_event_publisher, get_unit_of_work_factory
from rrs.api.main import app
from rrs.domain.table.entities import TableStatus
from rrs.infrastructure.db.models.base import Base
from rrs.infrastructure.db.models.reservation import ReservationModel  # noqa: F401
from rrs.infrastructure.db.models.table import TableCategoryModel, TableModel
from rrs.infrastructure.db.models.waitlist import WaitlistEntryModel  # noqa: F401
from rrs.infrastructure.db.unit_of_work import sql_unit_of_work_factory
from rrs.tools.seed import CATEGORIES, TABLES


class RecordingPublisher:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> None:
        self.messages.append((channel, message))


def seed_tables(engine: Engine) -> None:
    with Session(engine) as session:
        session.add_all(TableCategoryModel(**category) for category in CATEGORIES)
        session.flush()
        session.add_all(
            TableModel(
                id=table_id,
                table_number=table_number,
                category_id=category_id,
                capacity=capacity,
                status=TableStatus.AVAILABLE.value,
                location=location,
                has_window=has_window,
                is_private=is_private,
                last_modified_by="seed",
            )
            for table_id, table_number, category_id, capacity, location, has_window, is_private in TABLES
        )
        session.commit()


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    seed_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def uow_factory(engine: Engine):
    return sql_unit_of_work_factory(engine, timeout_seconds=0)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def client(uow_factory, publisher: RecordingPublisher) -> Iterator[TestClient]:
    app.dependency_overrides[get_unit_of_work_factory] = lambda: uow_factory
    app.dependency_overrides[get_event_publisher] = lambda: publisher
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
