from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field


class MoneyResponse(BaseModel):
    amountCents: int
    currency: str


class CreateOrderResponse(BaseModel):
    orderId: str
    orderNumber: str
    estimatedDeliveryTime: datetime


class OrderStatusResponse(BaseModel):
    orderId: str
    orderNumber: str
    orderType: str
    status: str
    total: MoneyResponse
    estimatedDeliveryTime: datetime
    createdAt: datetime
    version: int


class OrderItemResponse(BaseModel):
    itemId: str | None = None
    name: str
    quantity: int
    unitPriceCents: int


class OrderSummaryResponse(BaseModel):
    orderId: str
    orderNumber: str
    orderType: str
    status: str
    customerName: str
    items: list[OrderItemResponse] = Field(default_factory=list)
    subtotal: MoneyResponse
    tax: MoneyResponse
    discount: MoneyResponse
    total: MoneyResponse
    promotionId: str | None = None
    tableId: str | None = None
    estimatedDeliveryTime: datetime
    createdAt: datetime
    version: int


class OrderListResponse(BaseModel):
    orders: list[OrderSummaryResponse] = Field(default_factory=list)


class AvailableSlotsResponse(BaseModel):
    reservationDate: date
    partySize: int
    availableSlots: list[str] = Field(default_factory=list)


class CreateReservationResponse(BaseModel):
    reservationId: str
    tableNumber: int
    message: str = "Reservation confirmed"


class ReservationResponse(BaseModel):
    reservationId: str
    tableId: str
    tableNumber: int | None = None
    customerName: str
    customerEmail: str | None = None
    customerPhone: str | None = None
    partySize: int
    reservationDate: date
    reservationTime: str
    status: str
    specialRequests: str | None = None
    createdAt: datetime


class ReservationListResponse(BaseModel):
    reservations: list[ReservationResponse] = Field(default_factory=list)


class PromotionResponse(BaseModel):
    promotionId: str
    name: str
    type: str
    discountValue: int
    usageLimit: int | None = None
    usedCount: int
    startDate: datetime
    endDate: datetime


class ActivePromotionsResponse(BaseModel):
    promotions: list[PromotionResponse] = Field(default_factory=list)
