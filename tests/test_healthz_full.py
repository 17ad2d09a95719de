from __future__ import annotations

from fastapi.testclient import TestClient

from tasklens.apps.api.main import app


def test_healthz_endpoints() -> None:
    with TestClient(app) as client:
        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/healthz").json() == {"ok": True}

        client.get("/tasks/state", params={"session": "probe"})
        payload = client.get("/healthz/full").json()

    assert payload["ok"] is True
    assert payload["python"]["version"]
    assert payload["sessions"] == {"mode": "session", "active": 1}
    assert payload["static_dir"]["exists"] is True


def test_correlation_id_is_echoed() -> None:
    with TestClient(app) as client:
        response = client.get("/healthz", headers={"X-Correlation-ID": "corr-42"})

    assert response.headers["X-Correlation-ID"] == "corr-42"
