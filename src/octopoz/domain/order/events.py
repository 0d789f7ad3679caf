from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from octopoz.domain.common.ids import OrderId, TenantId
from octopoz.domain.order.entities import OrderStatus


@dataclass(frozen=True)
class OrderCreated:
    order_id: OrderId
    tenant_id: TenantId
    order_number: str
    occurred_at: datetime


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    tenant_id: TenantId
    from_status: OrderStatus
    to_status: OrderStatus
    occurred_at: datetime
