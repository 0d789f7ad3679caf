from __future__ import annotations

from octopoz.application.dto.responses import (
    CreateOrderResponse,
    MoneyResponse,
    OrderItemResponse,
    OrderStatusResponse,
    OrderSummaryResponse,
)
from octopoz.domain.common.money import Money
from octopoz.domain.order.entities import Order


def _money(value: Money) -> MoneyResponse:
    return MoneyResponse(amountCents=value.amount_cents, currency=value.currency)


def to_create_order_response(order: Order) -> CreateOrderResponse:
    return CreateOrderResponse(
        orderId=str(order.order_id),
        orderNumber=order.order_number,
        estimatedDeliveryTime=order.estimated_delivery_time,
    )


def to_order_status_response(order: Order) -> OrderStatusResponse:
    return OrderStatusResponse(
        orderId=str(order.order_id),
        orderNumber=order.order_number,
        orderType=order.order_type.value,
        status=order.status.value,
        total=_money(order.totals.total),
        estimatedDeliveryTime=order.estimated_delivery_time,
        createdAt=order.created_at,
        version=order.version,
    )


def to_order_summary_response(order: Order) -> OrderSummaryResponse:
    totals = order.totals
    return OrderSummaryResponse(
        orderId=str(order.order_id),
        orderNumber=order.order_number,
        orderType=order.order_type.value,
        status=order.status.value,
        customerName=order.customer.name,
        items=[
            OrderItemResponse(
                itemId=item.item_id,
                name=item.name,
                quantity=item.quantity,
                unitPriceCents=item.unit_price_cents,
            )
            for item in order.items
        ],
        subtotal=_money(totals.subtotal),
        tax=_money(totals.tax),
        discount=_money(totals.discount),
        total=_money(totals.total),
        promotionId=str(order.promotion_id) if order.promotion_id else None,
        tableId=str(order.table_id) if order.table_id else None,
        estimatedDeliveryTime=order.estimated_delivery_time,
        createdAt=order.created_at,
        version=order.version,
    )
