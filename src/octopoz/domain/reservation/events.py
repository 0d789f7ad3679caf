from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from octopoz.domain.common.ids import ReservationId, TableId, TenantId
from octopoz.domain.reservation.entities import ReservationStatus


@dataclass(frozen=True)
class ReservationCreated:
    reservation_id: ReservationId
    tenant_id: TenantId
    table_id: TableId
    occurred_at: datetime


@dataclass(frozen=True)
class ReservationStatusChanged:
    reservation_id: ReservationId
    tenant_id: TenantId
    from_status: ReservationStatus
    to_status: ReservationStatus
    occurred_at: datetime
