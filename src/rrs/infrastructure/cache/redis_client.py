from __future__ import annotations

import logging
import os
from functools import lru_cache

import redis

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 1.0


def redis_url() -> str | None:
    return os.getenv("REDIS_URL") or None


def redis_configured() -> bool:
    return redis_url() is not None


@lru_cache(maxsize=8)
def _client_for(url: str, timeout_seconds: float) -> redis.Redis:
    return redis.Redis.from_url(
        url,
        socket_connect_timeout=timeout_seconds,
        socket_timeout=timeout_seconds,
        health_check_interval=30,
    )


def get_redis_client(timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> redis.Redis:
    url = redis_url()
    if url is None:
        raise RuntimeError("REDIS_URL is not set")
    return _client_for(url, timeout_seconds)


def ping_redis(timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> bool:
    try:
        return bool(get_redis_client(timeout_seconds).ping())
    except (redis.RedisError, RuntimeError):
        logger.warning("redis_ping_failed", exc_info=True)
        return False
