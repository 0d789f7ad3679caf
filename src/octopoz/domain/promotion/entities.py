from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from octopoz.domain.common.ids import PromotionId, TenantId


@dataclass(frozen=True)
class Promotion:
    promotion_id: PromotionId
    tenant_id: TenantId
    name: str
    promotion_type: str
    discount_value: int
    usage_limit: int | None
    used_count: int
    active: bool
    start_date: datetime
    end_date: datetime

    def __post_init__(self) -> None:
        if self.used_count < 0:
            raise ValueError("used_count must be >= 0")
        if self.usage_limit is not None and self.usage_limit < 0:
            raise ValueError("usage_limit must be >= 0")
        if self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and self.used_count >= self.usage_limit

    def in_window(self, now: datetime) -> bool:
        return self.start_date <= now <= self.end_date

    def rejection_reason(self, now: datetime) -> str | None:
        """Return why the promotion cannot be redeemed at ``now``, or None."""
        if not self.active:
            return "inactive"
        if not self.in_window(now):
            return "outside_window"
        if self.is_exhausted:
            return "usage_limit_reached"
        return None
