"""Shared pytest fixtures for app testing."""

import sys
import time
from pathlib import Path

import fakeredis
import pytest
from fakeredis.aioredis import FakeRedis as AsyncFakeRedis
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _fixed_tz(monkeypatch):
    """Pin local time so wall-clock arithmetic is deterministic."""
    if not hasattr(time, "tzset"):
        yield
        return
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def fake_server():
    return fakeredis.FakeServer()


@pytest.fixture
def redis_client(fake_server):
    client = fakeredis.FakeRedis(server=fake_server, decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def async_redis(fake_server):
    return AsyncFakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        '{"redis_url": "redis://localhost:6379/0", "log_file": "%s"}'
        % (tmp_path / "app.log").as_posix()
    )
    return path


@pytest.fixture
def client(monkeypatch, fake_server, config_file) -> TestClient:
    import app

    monkeypatch.setenv("CONFIG_PATH", str(config_file))
    monkeypatch.setattr(
        app,
        "get_sync_client",
        lambda url=None: fakeredis.FakeRedis(server=fake_server, decode_responses=True),
    )

    async def _fake_get_client(url: str | None = None):
        return AsyncFakeRedis(server=fake_server, decode_responses=True)

    monkeypatch.setattr(app, "get_client", _fake_get_client)

    with TestClient(app.app) as c:
        yield c
