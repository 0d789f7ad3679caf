from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from octopoz.api import dependencies
from octopoz.api.main import app
from octopoz.tools.seed import DEMO_PROMOTION_ID, DEMO_TENANT_ID, seed_demo_data


class RecordingPublisher:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> None:
        self.messages.append((channel, message))


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def client(engine, publisher: RecordingPublisher) -> Iterator[TestClient]:
    assert seed_demo_data(engine)
    app.dependency_overrides[dependencies.get_publisher] = lambda: publisher
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


def test_seed_is_idempotent(engine) -> None:
    assert seed_demo_data(engine)
    assert seed_demo_data(engine)


def test_ready_check_sees_migrated_database(client: TestClient) -> None:
    response = client.get("/health/ready")

    assert response.status_code == 200


def test_order_with_promotion_end_to_end(client: TestClient, publisher: RecordingPublisher) -> None:
    base = f"/v1/tenants/{DEMO_TENANT_ID}"
    promotions = client.get(f"{base}/active-promotions").json()["promotions"]
    assert [p["promotionId"] for p in promotions] == [DEMO_PROMOTION_ID]
    assert promotions[0]["usedCount"] == 0

    created = client.post(
        f"{base}/orders",
        json={
            "items": [{"name": "Margherita Pizza", "quantity": 2, "priceCents": 1450}],
            "orderType": "dine_in",
            "customerName": "Tim",
            "tableId": "tbl_003",
            "subtotalCents": 2900,
            "taxCents": 232,
            "discountCents": 290,
            "totalCents": 2842,
            "promotionId": DEMO_PROMOTION_ID,
        },
        headers={"X-Request-Id": "req-e2e"},
    )
    assert created.status_code == 201
    order_id = created.json()["orderId"]

    promotions = client.get(f"{base}/active-promotions").json()["promotions"]
    assert promotions[0]["usedCount"] == 1

    patched = client.patch(
        f"{base}/orders/{order_id}/status",
        json={"status": "preparing", "expectedVersion": 1},
    )
    assert patched.status_code == 200
    stale = client.patch(
        f"{base}/orders/{order_id}/status",
        json={"status": "ready", "expectedVersion": 1},
    )
    assert stale.status_code == 409
    assert stale.json()["error"]["code"] == "CONFLICT"

    event_types = [json.loads(message)["event_type"] for _, message in publisher.messages]
    assert event_types == ["order.created", "order.status_changed"]
    assert json.loads(publisher.messages[0][1])["request_id"] == "req-e2e"


def test_reservation_lifecycle_end_to_end(client: TestClient) -> None:
    base = f"/v1/tenants/{DEMO_TENANT_ID}"
    created = client.post(
        f"{base}/reservations",
        json={
            "customerName": "Radia",
            "customerEmail": "radia@example.com",
            "partySize": 5,
            "reservationDate": "2030-06-01",
            "reservationTime": "19:00",
        },
    )
    assert created.status_code == 201
    assert created.json()["tableNumber"] == 5

    listed = client.get(
        f"{base}/reservations",
        params={"date": "2030-06-01", "status": "confirmed"},
    )
    (reservation,) = listed.json()["reservations"]
    assert reservation["customerEmail"] == "radia@example.com"
    assert reservation["tableNumber"] == 5

    completed = client.patch(
        f"{base}/reservations/{reservation['reservationId']}",
        json={"status": "completed"},
    )
    assert completed.status_code == 200
    again = client.patch(
        f"{base}/reservations/{reservation['reservationId']}",
        json={"status": "cancelled"},
    )
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "INVALID_RESERVATION_TRANSITION"
