from __future__ import annotations

import logging
import os
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


def database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


@lru_cache(maxsize=8)
def _engine_for(url: str, connect_timeout: int) -> Engine:
    # connect_timeout is a libpq option; other backends reject it.
    is_postgres = make_url(url).get_backend_name() == "postgresql"
    return create_engine(
        url,
        pool_pre_ping=True,
        connect_args={"connect_timeout": connect_timeout} if is_postgres else {},
    )


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    return _engine_for(database_url(), max(1, int(timeout_seconds)))


def ping_database(timeout_seconds: float = 1.0) -> bool:
    try:
        with get_engine(timeout_seconds).connect() as connection:
            connection.execute(text("SELECT 1"))
    except (SQLAlchemyError, RuntimeError):
        logger.warning("database_ping_failed", exc_info=True)
        return False
    return True
