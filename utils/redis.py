"""Redis helper utilities.

Key naming conventions:
    ``navigator:state``      - JSON record of the navigator session state.
    ``tab:active_url``       - URL last reported by the browser companion.
    ``tab:last_navigation``  - URL of the last requested navigation.
    ``config``               - effective configuration mirror.
"""

import os
from functools import lru_cache
from typing import Optional

import redis as redis_sync
import redis.asyncio as redis_async
from loguru import logger
from redis.exceptions import RedisError

from config import config as shared_config

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def _resolve_url(url: Optional[str]) -> str:
    return url or shared_config.get("redis_url") or os.getenv("REDIS_URL", DEFAULT_REDIS_URL)


@lru_cache
def _get_pool(url: str) -> redis_async.ConnectionPool:
    """Return a connection pool for the given URL."""
    return redis_async.ConnectionPool.from_url(url, decode_responses=True)


async def get_client(url: Optional[str] = None) -> redis_async.Redis:
    """Return an async Redis client using a shared connection pool.

    The URL is resolved from the given argument, the shared configuration, or
    the ``REDIS_URL`` environment variable. Responses are decoded to ``str``
    automatically.
    """
    pool = _get_pool(_resolve_url(url))
    return redis_async.Redis(connection_pool=pool, decode_responses=True)


def get_sync_client(url: Optional[str] = None) -> redis_sync.Redis:
    """Return a synchronous Redis client."""
    url = _resolve_url(url)
    try:
        client = redis_sync.Redis.from_url(url, decode_responses=True)
        client.ping()
    except (RedisError, OSError) as e:
        logger.error("Failed to connect to Redis at {}: {}", url, e)
        raise
    return client
