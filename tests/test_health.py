from fastapi.testclient import TestClient


def test_live_endpoint_returns_ok(client: TestClient) -> None:
    resp = client.get("/health/live")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_ready_endpoint_behaviour(client: TestClient, monkeypatch) -> None:
    resp = client.get("/health/ready")
    assert resp.status_code == 200
    monkeypatch.setattr(client.app.state, "redis_client", None)
    resp2 = client.get("/health/ready")
    assert resp2.status_code == 503
