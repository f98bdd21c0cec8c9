import json

import fakeredis
import pytest

from config import DEFAULT_CONFIG, config, set_config
from core.config import CONFIG_DEFAULTS, load_config


def test_load_config_populates_defaults(tmp_path):
    cfg_path = tmp_path / "cfg.json"
    cfg_path.write_text('{"redis_url": "redis://localhost:6379/0", "log_level": "debug"}')
    r = fakeredis.FakeRedis(decode_responses=True)
    cfg = load_config(str(cfg_path), r)
    assert cfg["state_key"] == CONFIG_DEFAULTS["state_key"]
    assert cfg["navigate_channel"] == CONFIG_DEFAULTS["navigate_channel"]
    assert cfg["log_level"] == "DEBUG"
    assert json.loads(r.get("config"))["state_key"] == "navigator:state"


def test_minimal_load_skips_defaults(tmp_path):
    cfg_path = tmp_path / "cfg.json"
    cfg_path.write_text('{"redis_url": "redis://r:6379/1"}')
    info = load_config(str(cfg_path), None, minimal=True)
    assert info["redis_url"] == "redis://r:6379/1"
    assert "state_key" not in info["data"]


def test_redis_url_required(tmp_path, monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)
    cfg_path = tmp_path / "cfg.json"
    cfg_path.write_text("{}")
    with pytest.raises(KeyError):
        load_config(str(cfg_path), None)


def test_redis_url_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("REDIS_URL", "redis://env:6379/0")
    cfg_path = tmp_path / "cfg.json"
    cfg_path.write_text("{}")
    assert load_config(str(cfg_path), None)["redis_url"] == "redis://env:6379/0"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.json"), None)


def test_set_config_keeps_defaults():
    try:
        set_config({"state_key": "custom"})
        assert config["state_key"] == "custom"
        assert config["navigate_channel"] == DEFAULT_CONFIG["navigate_channel"]
    finally:
        set_config({})
