from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fakes import NOW, FakePublisher, FakeStore

from octopoz.application.dto.requests import CreateOrderRequest, UpdateOrderStatusRequest
from octopoz.application.errors import (
    InvalidOrderTransitionError,
    OrderNotFoundError,
    OrderVersionConflictError,
)
from octopoz.application.use_cases.context import TraceContext
from octopoz.application.use_cases.create_order import CreateOrder
from octopoz.application.use_cases.get_order_status import GetOrderStatus
from octopoz.application.use_cases.update_order_status import UpdateOrderStatus
from octopoz.domain.common.ids import OrderId, TenantId

TENANT = TenantId("tnt_001")
TRACE = TraceContext(trace_id=None, request_id="req-9")


def _placed_order(store: FakeStore) -> OrderId:
    store.add_tenant()
    request = CreateOrderRequest.model_validate(
        {
            "items": [{"name": "Soup", "quantity": 1, "priceCents": 800}],
            "orderType": "pickup",
            "customerName": "Grace",
            "subtotalCents": 800,
            "totalCents": 800,
        }
    )
    response = CreateOrder(store.uow_factory, FakePublisher(), clock=lambda: NOW).execute(
        TENANT, request, TRACE
    )
    return OrderId(response.orderId)


def _update(store: FakeStore, order_id: OrderId, publisher=None, **payload):
    request = UpdateOrderStatusRequest.model_validate(payload)
    use_case = UpdateOrderStatus(store.uow_factory, publisher or FakePublisher(), clock=lambda: NOW)
    return use_case.execute(TENANT, order_id, request, TRACE)


def test_status_moves_forward_and_bumps_version() -> None:
    store = FakeStore()
    order_id = _placed_order(store)
    publisher = FakePublisher()

    response = _update(store, order_id, publisher, status="confirmed")

    assert response.status == "confirmed"
    assert response.version == 2
    event = json.loads(publisher.messages[0][1])
    assert event["event_type"] == "order.status_changed"
    assert event["payload"]["fromStatus"] == "new"
    assert event["payload"]["status"] == "confirmed"


def test_same_status_is_a_no_op() -> None:
    store = FakeStore()
    order_id = _placed_order(store)
    publisher = FakePublisher()

    response = _update(store, order_id, publisher, status="new")

    assert response.version == 1
    assert publisher.messages == []


def test_backward_move_is_rejected() -> None:
    store = FakeStore()
    order_id = _placed_order(store)
    _update(store, order_id, status="preparing")

    with pytest.raises(InvalidOrderTransitionError):
        _update(store, order_id, status="confirmed")


def test_stale_expected_version_is_a_conflict() -> None:
    store = FakeStore()
    order_id = _placed_order(store)
    _update(store, order_id, status="confirmed")

    with pytest.raises(OrderVersionConflictError) as exc_info:
        _update(store, order_id, status="preparing", expectedVersion=1)
    assert exc_info.value.details == {"currentVersion": 2}


def test_unknown_order_is_not_found() -> None:
    store = FakeStore()
    store.add_tenant()
    with pytest.raises(OrderNotFoundError):
        _update(store, OrderId("ord_missing"), status="confirmed")
    with pytest.raises(OrderNotFoundError):
        GetOrderStatus(store.uow_factory).execute(TENANT, OrderId("ord_missing"))


def test_order_status_is_scoped_to_tenant() -> None:
    store = FakeStore()
    order_id = _placed_order(store)

    status = GetOrderStatus(store.uow_factory).execute(TENANT, order_id)
    assert status.orderNumber == "20240115-001"
    assert status.total.amountCents == 800

    with pytest.raises(OrderNotFoundError):
        GetOrderStatus(store.uow_factory).execute(TenantId("tnt_other"), order_id)
