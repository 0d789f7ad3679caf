from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from octopoz.application.dto.requests import CreateOrderRequest, CreateReservationRequest
from octopoz.domain.order.entities import OrderType


def _order_payload(**overrides) -> dict:
    payload = {
        "items": [
            {"itemId": "itm_1", "name": "Dumplings", "quantity": 3, "priceCents": 450},
            {"name": "Tea", "quantity": 1, "priceCents": 300},
        ],
        "orderType": "delivery",
        "customerName": "  Barbara Liskov  ",
        "deliveryAddress": "42 Harbour Rd",
        "subtotalCents": 1650,
        "taxCents": 150,
        "discountCents": 100,
        "totalCents": 1700,
    }
    payload.update(overrides)
    return payload


def test_valid_order_payload_is_parsed_from_camel_case() -> None:
    request = CreateOrderRequest.model_validate(_order_payload())

    assert request.order_type == OrderType.DELIVERY
    assert request.customer_name == "Barbara Liskov"
    assert request.currency == "USD"
    assert request.items[0].item_id == "itm_1"


@pytest.mark.parametrize(
    "overrides",
    [
        {"items": []},
        {"subtotalCents": 1600},
        {"totalCents": 1800},
        {"deliveryAddress": None},
        {"deliveryAddress": "   "},
        {"orderType": "takeaway"},
        {"currency": "usd"},
        {"customerName": ""},
        {"items": [{"name": "Tea", "quantity": 0, "priceCents": 300}]},
    ],
)
def test_invalid_order_payloads_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        CreateOrderRequest.model_validate(_order_payload(**overrides))


def test_reservation_payload_requires_positive_party_and_real_time() -> None:
    base = {
        "customerName": "Edsger",
        "partySize": 2,
        "reservationDate": "2024-02-10",
        "reservationTime": "19:30",
    }
    request = CreateReservationRequest.model_validate(base)
    assert request.reservation_time.hour == 19

    with pytest.raises(ValidationError):
        CreateReservationRequest.model_validate({**base, "partySize": 0})
    with pytest.raises(ValidationError):
        CreateReservationRequest.model_validate({**base, "reservationTime": "25:00"})
