from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from octopoz.domain.order.entities import Order
from octopoz.domain.order.events import OrderCreated, OrderStatusChanged
from octopoz.domain.reservation.entities import Reservation
from octopoz.domain.reservation.events import ReservationCreated, ReservationStatusChanged
from octopoz.domain.table.allocation import format_slot


def events_channel(tenant_id: str) -> str:
    return f"events:{tenant_id}"


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    tenant_id: str,
    payload: dict[str, Any],
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "tenant_id": tenant_id,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def _order_payload(order: Order) -> dict[str, Any]:
    return {
        "orderId": str(order.order_id),
        "orderNumber": order.order_number,
        "orderType": order.order_type.value,
        "status": order.status.value,
        "totalMoney": {
            "amountCents": order.totals.total.amount_cents,
            "currency": order.totals.total.currency,
        },
        "promotionId": str(order.promotion_id) if order.promotion_id else None,
        "tableId": str(order.table_id) if order.table_id else None,
        "createdAt": order.created_at.isoformat(),
        "estimatedDeliveryTime": order.estimated_delivery_time.isoformat(),
        "items": [
            {
                "itemId": item.item_id,
                "name": item.name,
                "quantity": item.quantity,
                "unitPriceCents": item.unit_price_cents,
            }
            for item in order.items
        ],
    }


def serialize_order_created(
    *,
    event: OrderCreated,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type="order.created",
        occurred_at=event.occurred_at,
        tenant_id=str(event.tenant_id),
        trace_id=trace_id,
        request_id=request_id,
        payload=_order_payload(order),
    )


def serialize_order_status_changed(
    *,
    event: OrderStatusChanged,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    payload = _order_payload(order)
    payload["fromStatus"] = event.from_status.value
    return _serialize_event(
        event_type="order.status_changed",
        occurred_at=event.occurred_at,
        tenant_id=str(event.tenant_id),
        trace_id=trace_id,
        request_id=request_id,
        payload=payload,
    )


def _reservation_payload(reservation: Reservation, table_number: int | None) -> dict[str, Any]:
    return {
        "reservationId": str(reservation.reservation_id),
        "tableId": str(reservation.table_id),
        "tableNumber": table_number,
        "partySize": reservation.party_size,
        "reservationDate": reservation.reservation_date.isoformat(),
        "reservationTime": format_slot(reservation.reservation_time),
        "status": reservation.status.value,
    }


def serialize_reservation_created(
    *,
    event: ReservationCreated,
    reservation: Reservation,
    table_number: int | None,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type="reservation.created",
        occurred_at=event.occurred_at,
        tenant_id=str(event.tenant_id),
        trace_id=trace_id,
        request_id=request_id,
        payload=_reservation_payload(reservation, table_number),
    )


def serialize_reservation_status_changed(
    *,
    event: ReservationStatusChanged,
    reservation: Reservation,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    payload = _reservation_payload(reservation, None)
    payload["fromStatus"] = event.from_status.value
    return _serialize_event(
        event_type="reservation.status_changed",
        occurred_at=event.occurred_at,
        tenant_id=str(event.tenant_id),
        trace_id=trace_id,
        request_id=request_id,
        payload=payload,
    )
