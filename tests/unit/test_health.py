from __future__ import annotations

import sys
from pathlib import Path

from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

import octopoz.api.routes.health as health_route
from octopoz.api.main import app


def test_live_health_endpoint() -> None:
    client = TestClient(app)
    response = client.get("/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ready_health_endpoint_healthy_with_mocks(monkeypatch) -> None:
    monkeypatch.setattr(health_route, "ping_database", lambda timeout_seconds=1.0: True)
    monkeypatch.setattr(health_route, "ping_redis", lambda timeout_seconds=1.0: True)
    monkeypatch.setattr(health_route, "redis_configured", lambda: True)

    response = TestClient(app).get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ready_reports_failed_database(monkeypatch) -> None:
    monkeypatch.setattr(health_route, "ping_database", lambda timeout_seconds=1.0: False)
    monkeypatch.setattr(health_route, "redis_configured", lambda: False)

    response = TestClient(app).get("/health/ready")

    assert response.status_code == 503
    assert response.json()["checks"] == {"database": False, "redis": True}


def test_metrics_endpoint_exposes_engine_counters() -> None:
    response = TestClient(app).get("/metrics")

    assert response.status_code == 200
    assert "octopoz_orders_admitted_total" in response.text


def test_request_id_header_is_echoed_or_replaced() -> None:
    client = TestClient(app)

    echoed = client.get("/health/live", headers={"X-Request-Id": "abc-123"})
    replaced = client.get("/health/live", headers={"X-Request-Id": "bad id with spaces"})

    assert echoed.headers["X-Request-Id"] == "abc-123"
    assert replaced.headers["X-Request-Id"].startswith("req_")


def test_http_metrics_are_labelled_by_route_template() -> None:
    client = TestClient(app)
    client.get("/health/live")

    body = client.get("/metrics").text

    assert 'route="/health/live"' in body
    assert "octopoz_http_request_duration_seconds" in body
