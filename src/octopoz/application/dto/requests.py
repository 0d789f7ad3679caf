from __future__ import annotations

from datetime import date, time

from pydantic import BaseModel, ConfigDict, Field, model_validator

from octopoz.domain.order.entities import OrderStatus, OrderType
from octopoz.domain.reservation.entities import ReservationStatus


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class OrderItemRequest(CamelBaseModel):
    item_id: str | None = None
    name: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    price_cents: int = Field(ge=0)


class CreateOrderRequest(CamelBaseModel):
    items: list[OrderItemRequest] = Field(min_length=1)
    order_type: OrderType
    customer_name: str = Field(min_length=1)
    customer_email: str | None = None
    customer_phone: str | None = None
    subtotal_cents: int = Field(ge=0)
    tax_cents: int = Field(default=0, ge=0)
    discount_cents: int = Field(default=0, ge=0)
    total_cents: int = Field(ge=0)
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    promotion_id: str | None = None
    table_id: str | None = None
    delivery_address: str | None = None
    special_instructions: str | None = None

    @model_validator(mode="after")
    def _check_consistency(self) -> CreateOrderRequest:
        if self.order_type == OrderType.DELIVERY and not (self.delivery_address or "").strip():
            raise ValueError("deliveryAddress is required for delivery orders")
        items_total = sum(item.price_cents * item.quantity for item in self.items)
        if self.subtotal_cents != items_total:
            raise ValueError("subtotalCents must equal the sum of item prices times quantities")
        if self.total_cents != self.subtotal_cents + self.tax_cents - self.discount_cents:
            raise ValueError("totalCents must equal subtotalCents + taxCents - discountCents")
        return self


class CreateReservationRequest(CamelBaseModel):
    customer_name: str = Field(min_length=1)
    customer_email: str | None = None
    customer_phone: str | None = None
    party_size: int = Field(ge=1)
    reservation_date: date
    reservation_time: time
    special_requests: str | None = None
    table_id: str | None = None


class UpdateOrderStatusRequest(CamelBaseModel):
    status: OrderStatus
    expected_version: int | None = Field(default=None, ge=1)


class UpdateReservationStatusRequest(CamelBaseModel):
    status: ReservationStatus
