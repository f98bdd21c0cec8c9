"""Access to the browser tab showing the dashboard.

The browser companion reports the URL of its active tab with
``PUT /api/tab/active``; navigation requests are published on a Redis channel
the companion subscribes to.

Key naming conventions:
    ``tab:active_url``       - last reported active tab URL.
    ``tab:last_navigation``  - last URL a navigation was requested for.
    ``tab:navigate``         - pub/sub channel carrying navigation requests.
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import Protocol

import redis.asyncio as redis_async
from loguru import logger
from redis.exceptions import RedisError

from core.errors import HostUnavailableError

ACTIVE_URL_KEY = "tab:active_url"
LAST_NAVIGATION_KEY = "tab:last_navigation"
NAVIGATE_CHANNEL = "tab:navigate"


class TabGateway(Protocol):
    async def get_active_target_url(self) -> str: ...

    async def navigate(self, url: str) -> None: ...


async def _maybe_await(res):
    if asyncio.iscoroutine(res):
        return await res
    return res


class RedisTabGateway:
    """Tab gateway backed by Redis keys and a pub/sub channel."""

    def __init__(
        self,
        client: redis_async.Redis,
        *,
        active_url_key: str = ACTIVE_URL_KEY,
        navigate_channel: str = NAVIGATE_CHANNEL,
    ):
        self.redis = client
        self.active_url_key = active_url_key
        self.navigate_channel = navigate_channel

    async def set_active_target_url(self, url: str) -> None:
        await _maybe_await(self.redis.set(self.active_url_key, url))

    async def get_active_target_url(self) -> str:
        try:
            url = await _maybe_await(self.redis.get(self.active_url_key))
        except (RedisError, OSError) as e:
            logger.error("Failed to read active tab URL: {}", e)
            raise HostUnavailableError("Failed to get tab URL") from e
        if isinstance(url, bytes):
            url = url.decode()
        if not url:
            raise HostUnavailableError("Failed to get tab URL")
        return url

    async def navigate(self, url: str) -> None:
        message = json.dumps({"url": url, "ts": int(time.time() * 1000)})
        try:
            await _maybe_await(self.redis.set(LAST_NAVIGATION_KEY, url))
            await _maybe_await(self.redis.set(self.active_url_key, url))
            await _maybe_await(self.redis.publish(self.navigate_channel, message))
        except (RedisError, OSError) as e:
            logger.error("Navigation request for {} failed: {}", url, e)
            raise HostUnavailableError("Navigation failed") from e
        logger.info("Requested navigation to {}", url)


__all__ = [
    "ACTIVE_URL_KEY",
    "LAST_NAVIGATION_KEY",
    "NAVIGATE_CHANNEL",
    "TabGateway",
    "RedisTabGateway",
]
