import json
from urllib.parse import parse_qs, urlsplit

import redis
from fastapi.testclient import TestClient

from utils.time import decode_instant

START = "2024-01-01 00:00:00"


def _ms(text: str) -> int:
    return decode_instant(text).value


def _set_tab(client: TestClient, url: str) -> None:
    r = client.put("/api/tab/active", json={"url": url})
    assert r.status_code == 200


def test_state_starts_uninitialized(client: TestClient):
    r = client.get("/api/range/state")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["window"] is None
    assert body["state"]["interval_input"] == "2h"


def test_initialize_and_forward(client: TestClient):
    _set_tab(client, "https://host/d/x?from=1&to=2&var=a")
    r = client.post("/api/range/initialize", json={"start": START, "interval": "1h"})
    assert r.status_code == 200
    assert r.json()["window"]["from_text"] == START
    assert r.json()["navigated_to"] is None

    r = client.post("/api/range/forward", json={"interval": "1h"})
    body = r.json()
    assert r.status_code == 200
    assert body["window"]["from_text"] == "2024-01-01 01:00:00"
    assert body["window"]["to_text"] == "2024-01-01 02:00:00"
    assert body["navigated_to"] == (
        f"https://host/d/x?from={_ms('2024-01-01 01:00:00')}&to={_ms('2024-01-01 02:00:00')}&var=a"
    )


def test_back_after_apply(client: TestClient):
    _set_tab(client, "https://host/d/x")
    r = client.post("/api/range/apply", json={"start": START, "interval": "2h"})
    assert r.status_code == 200
    r = client.post("/api/range/back", json={"interval": "2h"})
    assert r.json()["window"]["from_text"] == "2023-12-31 22:00:00"


def test_format_error_payload(client: TestClient):
    r = client.post("/api/range/initialize", json={"start": START, "interval": "abc"})
    assert r.status_code == 400
    assert r.json() == {
        "ok": False,
        "code": "format_error",
        "message": "Invalid interval format. Use: 30m, 1h, 2h, 1d, etc.",
    }


def test_apply_without_tab_is_503(client: TestClient):
    r = client.post("/api/range/apply", json={"start": START, "interval": "1h"})
    assert r.status_code == 503
    assert r.json()["code"] == "host_unavailable"
    # state was still committed
    assert client.get("/api/range/state").json()["window"] is not None


def test_malformed_panes_is_422(client: TestClient):
    _set_tab(client, "https://host/explore?panes=%7Bnope")
    r = client.post("/api/range/apply", json={"start": START, "interval": "1h"})
    assert r.status_code == 422
    assert r.json()["code"] == "malformed_pane_data"


def test_multi_pane_apply(client: TestClient):
    panes = {"a": {"range": {"from": "1", "to": "2"}}, "b": {"schemaVersion": 1}}
    _set_tab(client, "https://host/explore?panes=" + json.dumps(panes))
    r = client.post("/api/range/apply", json={"start": START, "interval": "1h"})
    out = json.loads(parse_qs(urlsplit(r.json()["navigated_to"]).query)["panes"][0])
    assert out["a"]["range"] == {"from": str(_ms(START)), "to": str(_ms("2024-01-01 01:00:00"))}
    assert out["b"] == {"schemaVersion": 1}


def test_project_requires_window(client: TestClient):
    r = client.post("/api/range/project", json={"url": "https://host/d/x"})
    assert r.status_code == 409
    assert r.json()["message"] == "Set a range first"


def test_project_without_navigation(client: TestClient):
    client.post("/api/range/initialize", json={"start": START, "interval": "1h"})
    r = client.post("/api/range/project", json={"url": "https://host/d/x?from=1&to=2"})
    assert r.json() == {
        "ok": True,
        "url": f"https://host/d/x?from={_ms(START)}&to={_ms('2024-01-01 01:00:00')}",
    }


def test_live_inputs_and_reset(client: TestClient):
    client.post("/api/range/initialize", json={"start": START, "interval": "1h"})
    r = client.post("/api/range/inputs/interval", json={"text": "30m"})
    assert r.json()["window"]["to_text"] == "2024-01-01 00:30:00"
    r = client.post("/api/range/inputs/start", json={"text": "2024-01-0"})
    assert r.status_code == 200
    assert r.json()["window"]["from_text"] == START

    r = client.post("/api/range/reset")
    assert r.json()["window"] is None
    assert r.json()["state"]["interval_input"] == "2h"
    assert client.app.state.redis_client.get("navigator:state") is None


def test_storage_failure_keeps_reported_state(client: TestClient, monkeypatch):
    _set_tab(client, "https://host/d/x")
    client.post("/api/range/initialize", json={"start": START, "interval": "1h"})

    def _fail(*args, **kwargs):
        raise redis.ConnectionError("boom")

    monkeypatch.setattr(client.app.state.redis_client, "set", _fail)
    r = client.post("/api/range/forward", json={"interval": "1h"})
    assert r.status_code == 503
    assert r.json()["code"] == "storage_unavailable"
    assert client.get("/api/range/state").json()["window"]["from_text"] == START
