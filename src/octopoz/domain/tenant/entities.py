from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from octopoz.domain.common.ids import TenantId


class TenantStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class Tenant:
    tenant_id: TenantId
    name: str
    monthly_capacity: int
    status: TenantStatus

    def __post_init__(self) -> None:
        if self.monthly_capacity < 0:
            raise ValueError("monthly_capacity must be >= 0")

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE


class PeriodKind(str, Enum):
    MONTH = "month"
    DAY = "day"


@dataclass(frozen=True)
class CounterKey:
    """Identity of one row of the per-tenant counter store."""

    tenant_id: TenantId
    period_kind: PeriodKind
    period_value: str


def monthly_counter_key(tenant_id: TenantId, day: date) -> CounterKey:
    return CounterKey(
        tenant_id=tenant_id,
        period_kind=PeriodKind.MONTH,
        period_value=f"{day.year:04d}-{day.month:02d}",
    )


def daily_sequence_key(tenant_id: TenantId, day: date) -> CounterKey:
    return CounterKey(
        tenant_id=tenant_id,
        period_kind=PeriodKind.DAY,
        period_value=day.isoformat(),
    )
