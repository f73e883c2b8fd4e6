from __future__ import annotations

import logging
import os
import zlib
from datetime import date, time
from types import TracebackType

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rrs.application.ports.repositories import UnitOfWorkFactory
from rrs.domain.common.errors import PersistenceError
from rrs.infrastructure.db.repositories.reservation_repo import SqlAlchemyReservationRepository
from rrs.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from rrs.infrastructure.db.repositories.waitlist_repo import SqlAlchemyWaitlistRepository
from rrs.infrastructure.db.session import get_engine

logger = logging.getLogger(__name__)

DEFAULT_STORE_TIMEOUT_SECONDS = 5.0


def store_timeout_seconds() -> float:
    raw = os.getenv("RRS_STORE_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_STORE_TIMEOUT_SECONDS
    return float(raw)


class SqlAlchemyUnitOfWork:
    """One Session, one transaction. Store failures surface as PersistenceError."""

    def __init__(self, engine: Engine, *, timeout_seconds: float | None = None) -> None:
        self._engine = engine
        self._timeout_seconds = timeout_seconds
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = Session(self._engine, expire_on_commit=False)
        self.tables = SqlAlchemyTableRepository(self._session)
        self.reservations = SqlAlchemyReservationRepository(self._session)
        self.waitlist = SqlAlchemyWaitlistRepository(self._session)
        if self._timeout_seconds and self._is_postgres:
            timeout_ms = int(self._timeout_seconds * 1000)
            try:
                self._session.execute(text(f"SET LOCAL statement_timeout = {timeout_ms}"))
            except SQLAlchemyError as exc:
                self._close()
                raise PersistenceError("record store unavailable") from exc
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if exc is not None:
                self.rollback()
                logger.warning(
                    "unit_of_work_rolled_back",
                    extra={"error_type": type(exc).__name__},
                )
            else:
                # Leaving without commit discards the transaction.
                self.rollback()
        finally:
            self._close()
        if isinstance(exc, SQLAlchemyError):
            raise PersistenceError(f"record store operation failed: {exc}") from exc

    def commit(self) -> None:
        session = self._require_session()
        try:
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise PersistenceError(f"record store commit failed: {exc}") from exc

    def rollback(self) -> None:
        if self._session is None:
            return
        try:
            self._session.rollback()
        except SQLAlchemyError:
            logger.exception("unit_of_work_rollback_failed")

    def lock_waitlist_queue(self, requested_date: date, requested_time: time) -> None:
        if not self._is_postgres:
            return
        key = zlib.crc32(
            f"waitlist:{requested_date.isoformat()}T{requested_time.isoformat()}".encode("utf-8")
        )
        self._require_session().execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": key},
        )

    @property
    def _is_postgres(self) -> bool:
        return self._engine.dialect.name == "postgresql"

    def _require_session(self) -> Session:
        if self._session is None:
            raise RuntimeError("unit of work used outside its context")
        return self._session

    def _close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None


def sql_unit_of_work_factory(
    engine: Engine | None = None,
    *,
    timeout_seconds: float | None = None,
) -> UnitOfWorkFactory:
    bound_engine = engine or get_engine()
    timeout = store_timeout_seconds() if timeout_seconds is None else timeout_seconds

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(bound_engine, timeout_seconds=timeout)

    return factory
