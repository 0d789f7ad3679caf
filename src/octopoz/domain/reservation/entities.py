from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from enum import Enum

from octopoz.domain.common.customer import CustomerInfo
from octopoz.domain.common.ids import ReservationId, TableId, TenantId


class ReservationStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


@dataclass(frozen=True)
class Reservation:
    reservation_id: ReservationId
    tenant_id: TenantId
    table_id: TableId
    customer: CustomerInfo
    party_size: int
    reservation_date: date
    reservation_time: time
    status: ReservationStatus
    created_at: datetime
    special_requests: str | None = None

    def __post_init__(self) -> None:
        if self.party_size < 1:
            raise ValueError("party_size must be >= 1")

    @property
    def blocks_table(self) -> bool:
        return self.status != ReservationStatus.CANCELLED

    def transition_to(self, new_status: ReservationStatus) -> Reservation:
        if self.status != ReservationStatus.CONFIRMED:
            raise ReservationTransitionError(
                f"reservation {self.reservation_id} is {self.status.value} and can no longer change"
            )
        if new_status == ReservationStatus.CONFIRMED:
            raise ReservationTransitionError("reservation is already confirmed")
        return replace(self, status=new_status)


class ReservationTransitionError(Exception):
    pass
