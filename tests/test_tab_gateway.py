import asyncio
import json

import pytest
import redis

from core.errors import HostUnavailableError
from modules.tab_gateway import LAST_NAVIGATION_KEY, RedisTabGateway


def test_active_url_round_trip(async_redis):
    gw = RedisTabGateway(async_redis)

    async def run():
        await gw.set_active_target_url("https://host/d/x?from=1&to=2")
        return await gw.get_active_target_url()

    assert asyncio.run(run()) == "https://host/d/x?from=1&to=2"


def test_missing_active_url_is_host_unavailable(async_redis):
    gw = RedisTabGateway(async_redis)
    with pytest.raises(HostUnavailableError) as exc:
        asyncio.run(gw.get_active_target_url())
    assert exc.value.message == "Failed to get tab URL"


def test_navigate_publishes_and_records(async_redis, redis_client):
    gw = RedisTabGateway(async_redis, navigate_channel="tab:navigate")
    pubsub = redis_client.pubsub()
    pubsub.subscribe("tab:navigate")
    pubsub.get_message(timeout=1)  # subscribe confirmation

    asyncio.run(gw.navigate("https://host/d/x?from=1000&to=2000"))

    msg = pubsub.get_message(timeout=1)
    assert msg is not None
    assert json.loads(msg["data"])["url"] == "https://host/d/x?from=1000&to=2000"
    assert redis_client.get(LAST_NAVIGATION_KEY) == "https://host/d/x?from=1000&to=2000"
    assert redis_client.get("tab:active_url") == "https://host/d/x?from=1000&to=2000"


class FailingAsyncRedis:
    async def get(self, *args, **kwargs):
        raise redis.RedisError("boom")

    async def set(self, *args, **kwargs):
        raise redis.RedisError("boom")

    async def publish(self, *args, **kwargs):
        raise redis.RedisError("boom")


def test_redis_failures_become_host_unavailable():
    gw = RedisTabGateway(FailingAsyncRedis())
    with pytest.raises(HostUnavailableError):
        asyncio.run(gw.get_active_target_url())
    with pytest.raises(HostUnavailableError) as exc:
        asyncio.run(gw.navigate("https://host/"))
    assert exc.value.message == "Navigation failed"
