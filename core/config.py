"""Configuration loading utilities.

The configuration file is a small JSON document; only ``redis_url`` is
required (it may also come from the ``REDIS_URL`` environment variable).
The effective configuration is mirrored into Redis under ``config``.
"""

from __future__ import annotations

import json
import os

import redis

# Default configuration values for :func:`load_config`.
CONFIG_DEFAULTS = {
    "state_key": "navigator:state",
    "active_url_key": "tab:active_url",
    "navigate_channel": "tab:navigate",
    "log_level": "INFO",
    "log_file": "app.log",
    "port": 8000,
}

__all__ = ["CONFIG_DEFAULTS", "load_config"]


# Internal helpers --------------------------------------------------------


def _read_config_file(path: str) -> dict:
    """Read a JSON configuration file from ``path``."""

    if not os.path.exists(path):
        raise FileNotFoundError(path)
    with open(path) as f:
        return json.load(f)


def _apply_defaults(data: dict) -> dict:
    """Populate missing configuration keys and normalize fields."""

    for key, value in CONFIG_DEFAULTS.items():
        data.setdefault(key, value)
    data["log_level"] = str(data["log_level"]).upper()
    data["port"] = int(data["port"])
    return data


def _persist_to_redis(data: dict, redis_client: redis.Redis | None) -> None:
    """Store ``data`` in ``redis_client`` if provided."""

    if redis_client is not None:
        redis_client.set("config", json.dumps(data))


# load_config routine
def load_config(
    path: str,
    r: redis.Redis | None,
    *,
    data: dict | None = None,
    minimal: bool = False,
) -> dict:
    """Load configuration from ``path``.

    If ``minimal`` is ``True``, a dictionary containing the ``redis_url`` and
    raw data is returned without applying defaults or touching Redis, so the
    caller can connect before the full load.

    When ``data`` is provided, it is used instead of reading from ``path`` so
    the file is parsed only once.
    """

    if data is None:
        data = _read_config_file(path)

    if not data.get("redis_url") and os.getenv("REDIS_URL"):
        data["redis_url"] = os.environ["REDIS_URL"]
    if not data.get("redis_url"):
        raise KeyError("redis_url is required")
    if minimal:
        return {"redis_url": data["redis_url"], "data": data}
    data = _apply_defaults(data)
    _persist_to_redis(data, r)
    return data
