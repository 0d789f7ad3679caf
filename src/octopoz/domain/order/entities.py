from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from enum import Enum

from octopoz.domain.common.customer import CustomerInfo
from octopoz.domain.common.ids import OrderId, PromotionId, TableId, TenantId
from octopoz.domain.common.money import Money

DELIVERY_LEAD_TIME = timedelta(minutes=45)
DEFAULT_LEAD_TIME = timedelta(minutes=20)
ORDER_NUMBER_MIN_DIGITS = 3


class OrderType(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"
    DINE_IN = "dine_in"


class OrderStatus(str, Enum):
    NEW = "new"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


_FORWARD_SEQUENCE = (
    OrderStatus.NEW,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.DELIVERED,
)
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


@dataclass(frozen=True)
class OrderItem:
    name: str
    quantity: int
    unit_price_cents: int
    item_id: str | None = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")
        if self.unit_price_cents < 0:
            raise ValueError("unit_price_cents must be >= 0")

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Money
    tax: Money
    discount: Money
    total: Money

    def __post_init__(self) -> None:
        expected = self.subtotal.plus(self.tax).minus(self.discount)
        if expected != self.total:
            raise ValueError("total must equal subtotal + tax - discount")


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    tenant_id: TenantId
    order_number: str
    order_type: OrderType
    status: OrderStatus
    customer: CustomerInfo
    items: list[OrderItem]
    totals: OrderTotals
    created_at: datetime
    estimated_delivery_time: datetime
    promotion_id: PromotionId | None = None
    table_id: TableId | None = None
    delivery_address: str | None = None
    special_instructions: str | None = None
    version: int = 1

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("order must contain at least one item")
        if self.order_type == OrderType.DELIVERY and not self.delivery_address:
            raise ValueError("delivery orders require a delivery_address")

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def transition_to(self, new_status: OrderStatus) -> Order:
        if self.is_terminal:
            raise OrderTransitionError(
                f"order {self.order_id} is {self.status.value} and can no longer change"
            )
        if new_status == OrderStatus.CANCELLED:
            return replace(self, status=new_status)
        if _FORWARD_SEQUENCE.index(new_status) <= _FORWARD_SEQUENCE.index(self.status):
            raise OrderTransitionError(
                f"cannot move order from status={self.status.value} to status={new_status.value}"
            )
        return replace(self, status=new_status)


def format_order_number(day: date, sequence: int) -> str:
    if sequence < 1:
        raise ValueError("sequence must be >= 1")
    return f"{day:%Y%m%d}-{sequence:0{ORDER_NUMBER_MIN_DIGITS}d}"


def estimate_delivery_time(order_type: OrderType, started_at: datetime) -> datetime:
    if order_type == OrderType.DELIVERY:
        return started_at + DELIVERY_LEAD_TIME
    return started_at + DEFAULT_LEAD_TIME


def create_new_order(
    order_id: OrderId,
    tenant_id: TenantId,
    order_number: str,
    order_type: OrderType,
    customer: CustomerInfo,
    items: list[OrderItem],
    totals: OrderTotals,
    now: datetime,
    promotion_id: PromotionId | None = None,
    table_id: TableId | None = None,
    delivery_address: str | None = None,
    special_instructions: str | None = None,
) -> Order:
    return Order(
        order_id=order_id,
        tenant_id=tenant_id,
        order_number=order_number,
        order_type=order_type,
        status=OrderStatus.NEW,
        customer=customer,
        items=items,
        totals=totals,
        created_at=now,
        estimated_delivery_time=estimate_delivery_time(order_type, now),
        promotion_id=promotion_id,
        table_id=table_id,
        delivery_address=delivery_address,
        special_instructions=special_instructions,
    )


class OrderTransitionError(Exception):
    pass
