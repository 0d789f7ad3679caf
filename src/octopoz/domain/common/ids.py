from __future__ import annotations

from typing import NewType

TenantId = NewType("TenantId", str)
OrderId = NewType("OrderId", str)
PromotionId = NewType("PromotionId", str)
TableId = NewType("TableId", str)
ReservationId = NewType("ReservationId", str)
