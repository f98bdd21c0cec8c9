"""Redis persistence for :class:`~modules.window_state.NavigatorState`.

The whole state is stored as one JSON document under a single key.  Instants
are written as ISO-8601 UTC strings and the raw input texts are kept verbatim
so a reload shows exactly what the user typed.
"""

from __future__ import annotations

import json
from typing import Optional, Protocol

import redis
from loguru import logger
from redis.exceptions import RedisError

from modules.window_state import NavigatorState, TimeWindow
from utils.duration import DEFAULT_INTERVAL, DEFAULT_INTERVAL_MS
from utils.time import from_iso_utc, to_iso_utc

DEFAULT_STATE_KEY = "navigator:state"


class StateStore(Protocol):
    def load(self) -> Optional[NavigatorState]: ...

    def save(self, state: NavigatorState) -> None: ...

    def clear(self) -> None: ...


def _iso_or_none(ms: Optional[int]) -> Optional[str]:
    return to_iso_utc(ms) if ms is not None else None


def _ms_or_none(text: Optional[str]) -> Optional[int]:
    return from_iso_utc(text) if text else None


def state_to_record(state: NavigatorState) -> dict:
    """Serialize ``state`` into the persisted record layout."""
    window = state.window
    return {
        "startTime": _iso_or_none(state.anchor_ms),
        "intervalMs": state.interval_ms,
        "currentFrom": _iso_or_none(window.start_ms if window else None),
        "currentTo": _iso_or_none(window.end_ms if window else None),
        "startTimeInput": state.raw_start_input,
        "intervalInput": state.raw_interval_input,
    }


def record_to_state(record: dict) -> NavigatorState:
    """Rebuild a :class:`NavigatorState` from a persisted record.

    Raises ``ValueError`` when an instant field cannot be parsed.
    """
    state = NavigatorState()
    state.anchor_ms = _ms_or_none(record.get("startTime"))
    state.interval_ms = int(record.get("intervalMs") or DEFAULT_INTERVAL_MS)
    start = _ms_or_none(record.get("currentFrom"))
    end = _ms_or_none(record.get("currentTo"))
    if start is not None and end is not None:
        state.window = TimeWindow(start, end)
    if record.get("startTimeInput"):
        state.raw_start_input = record["startTimeInput"]
    state.raw_interval_input = record.get("intervalInput") or DEFAULT_INTERVAL
    return state


class RedisStateStore:
    """Store navigator state in Redis under ``key``."""

    def __init__(self, client: redis.Redis, key: str = DEFAULT_STATE_KEY):
        self.redis = client
        self.key = key

    def load(self) -> Optional[NavigatorState]:
        raw = self.redis.get(self.key)
        if not raw:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()
        try:
            record = json.loads(raw)
            if not isinstance(record, dict):
                raise ValueError("state record is not an object")
            return record_to_state(record)
        except (ValueError, TypeError) as e:
            logger.warning("Discarding unreadable navigator state at {}: {}", self.key, e)
            return None

    def save(self, state: NavigatorState) -> None:
        try:
            self.redis.set(self.key, json.dumps(state_to_record(state)))
        except RedisError as e:
            logger.error("Failed to save navigator state to {}: {}", self.key, e)
            raise

    def clear(self) -> None:
        try:
            self.redis.delete(self.key)
        except RedisError as e:
            logger.error("Failed to clear navigator state at {}: {}", self.key, e)
            raise


__all__ = [
    "DEFAULT_STATE_KEY",
    "StateStore",
    "RedisStateStore",
    "state_to_record",
    "record_to_state",
]
