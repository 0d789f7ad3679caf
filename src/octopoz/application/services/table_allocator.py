from __future__ import annotations

import logging
from datetime import date, datetime, time
from uuid import uuid4

from octopoz.application.errors import NoTableAvailableError, TableUnavailableError
from octopoz.application.metrics.engine_metrics import record_booking_conflict
from octopoz.application.ports.repositories import ReservationRepository, TableRepository
from octopoz.domain.common.customer import CustomerInfo
from octopoz.domain.common.ids import ReservationId, TableId, TenantId
from octopoz.domain.reservation.entities import Reservation, ReservationStatus
from octopoz.domain.table.allocation import (
    SlotPolicy,
    compute_available_slots,
    format_slot,
    has_table_conflict,
    rank_best_fit,
)
from octopoz.domain.table.entities import Table

logger = logging.getLogger(__name__)


class TableAllocator:
    """Chooses tables for parties and books them without double-booking.

    Slot listing is a read-only capacity estimate; ``book_table`` is the
    authoritative check and must run inside the transaction that inserts the
    reservation.
    """

    def __init__(
        self,
        tables: TableRepository,
        reservations: ReservationRepository,
        policy: SlotPolicy | None = None,
    ) -> None:
        self._tables = tables
        self._reservations = reservations
        self._policy = policy or SlotPolicy()

    @property
    def policy(self) -> SlotPolicy:
        return self._policy

    def candidate_tables(self, tenant_id: TenantId, party_size: int) -> list[Table]:
        return rank_best_fit(self._tables.list_for_tenant(tenant_id), party_size)

    def find_table(self, tenant_id: TenantId, party_size: int) -> Table:
        candidates = self.candidate_tables(tenant_id, party_size)
        if not candidates:
            raise NoTableAvailableError(
                f"no available table seats a party of {party_size}",
                details={"partySize": party_size},
            )
        return candidates[0]

    def compute_available_slots(
        self,
        tenant_id: TenantId,
        reservation_date: date,
        party_size: int,
    ) -> list[str]:
        tables = self._tables.list_for_tenant(tenant_id)
        reservations = self._reservations.list_for_date(tenant_id, reservation_date)
        return compute_available_slots(tables, reservations, party_size, self._policy)

    def book_table(
        self,
        tenant_id: TenantId,
        table_id: TableId,
        reservation_date: date,
        reservation_time: time,
        party_size: int,
        customer: CustomerInfo,
        now: datetime,
        special_requests: str | None = None,
    ) -> Reservation:
        table = self._tables.lock(tenant_id=tenant_id, table_id=table_id)
        if table is None:
            raise TableUnavailableError(
                f"table {table_id} does not exist",
                details={"tableId": str(table_id), "reason": "not_found"},
            )
        if not table.seats(party_size):
            raise TableUnavailableError(
                f"table {table.table_number} cannot seat a party of {party_size}",
                details={
                    "tableId": str(table_id),
                    "reason": "capacity" if table.capacity < party_size else table.status.value,
                },
            )

        existing = self._reservations.list_for_date(tenant_id, reservation_date, table_id=table_id)
        if has_table_conflict(existing, table_id, reservation_time, self._policy.buffer_minutes):
            record_booking_conflict(str(tenant_id))
            logger.info(
                "booking_conflict",
                extra={
                    "tenant_id": str(tenant_id),
                    "table_id": str(table_id),
                    "slot": format_slot(reservation_time),
                },
            )
            raise TableUnavailableError(
                f"table {table.table_number} is already booked within "
                f"{self._policy.buffer_minutes} minutes of {format_slot(reservation_time)}",
                details={"tableId": str(table_id), "reason": "conflict"},
            )

        reservation = Reservation(
            reservation_id=ReservationId(f"rsv_{uuid4().hex[:12]}"),
            tenant_id=tenant_id,
            table_id=table_id,
            customer=customer,
            party_size=party_size,
            reservation_date=reservation_date,
            reservation_time=reservation_time,
            status=ReservationStatus.CONFIRMED,
            created_at=now,
            special_requests=special_requests,
        )
        self._reservations.add(reservation)
        return reservation
