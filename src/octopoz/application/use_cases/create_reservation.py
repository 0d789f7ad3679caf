from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from octopoz.application.dto.requests import CreateReservationRequest
from octopoz.application.dto.responses import CreateReservationResponse
from octopoz.application.errors import TableUnavailableError
from octopoz.application.mappers.event_envelope import (
    events_channel,
    serialize_reservation_created,
)
from octopoz.application.metrics.engine_metrics import record_reservation_booked
from octopoz.application.ports.publisher import EventPublisher
from octopoz.application.ports.repositories import UnitOfWork, UnitOfWorkFactory
from octopoz.application.services.table_allocator import TableAllocator
from octopoz.application.transactions import RetryPolicy, run_in_transaction
from octopoz.application.use_cases.context import TraceContext, publish_after_commit, utcnow
from octopoz.application.use_cases.tenant_guard import load_active_tenant
from octopoz.domain.common.customer import CustomerInfo
from octopoz.domain.common.ids import TableId, TenantId
from octopoz.domain.reservation.entities import Reservation
from octopoz.domain.reservation.events import ReservationCreated
from octopoz.domain.table.allocation import SlotPolicy, format_slot
from octopoz.domain.table.entities import Table

logger = logging.getLogger(__name__)


class CreateReservation:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        publisher: EventPublisher,
        slot_policy: SlotPolicy | None = None,
        retry_policy: RetryPolicy | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._publisher = publisher
        self._slot_policy = slot_policy or SlotPolicy()
        self._retry_policy = retry_policy
        self._clock = clock

    def execute(
        self,
        tenant_id: TenantId,
        request_dto: CreateReservationRequest,
        trace_ctx: TraceContext,
    ) -> CreateReservationResponse:
        now = self._clock()
        customer = CustomerInfo(
            name=request_dto.customer_name,
            email=request_dto.customer_email,
            phone=request_dto.customer_phone,
        )

        def _work(uow: UnitOfWork) -> tuple[Reservation, Table]:
            load_active_tenant(uow.tenants, tenant_id)
            allocator = TableAllocator(uow.tables, uow.reservations, self._slot_policy)

            if request_dto.table_id:
                table_id = TableId(request_dto.table_id)
                candidates = [self._preselected_table(uow, tenant_id, table_id)]
            else:
                allocator.find_table(tenant_id, request_dto.party_size)
                candidates = allocator.candidate_tables(tenant_id, request_dto.party_size)

            last_error: TableUnavailableError | None = None
            for table in candidates:
                try:
                    reservation = allocator.book_table(
                        tenant_id=tenant_id,
                        table_id=table.table_id,
                        reservation_date=request_dto.reservation_date,
                        reservation_time=request_dto.reservation_time,
                        party_size=request_dto.party_size,
                        customer=customer,
                        now=now,
                        special_requests=request_dto.special_requests,
                    )
                except TableUnavailableError as exc:
                    last_error = exc
                    continue
                return reservation, table

            if last_error is not None and len(candidates) == 1:
                raise last_error
            raise TableUnavailableError(
                f"every table for a party of {request_dto.party_size} is booked near "
                f"{format_slot(request_dto.reservation_time)}",
                details={"partySize": request_dto.party_size, "reason": "conflict"},
            )

        reservation, table = run_in_transaction(
            self._uow_factory,
            _work,
            operation="create_reservation",
            retry_policy=self._retry_policy,
        )

        record_reservation_booked(str(tenant_id))
        logger.info(
            "reservation_created",
            extra={
                "tenant_id": str(tenant_id),
                "reservation_id": str(reservation.reservation_id),
                "table_id": str(table.table_id),
            },
        )
        event = ReservationCreated(
            reservation_id=reservation.reservation_id,
            tenant_id=reservation.tenant_id,
            table_id=reservation.table_id,
            occurred_at=now,
        )
        publish_after_commit(
            self._publisher,
            channel=events_channel(str(tenant_id)),
            message=serialize_reservation_created(
                event=event,
                reservation=reservation,
                table_number=table.table_number,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return CreateReservationResponse(
            reservationId=str(reservation.reservation_id),
            tableNumber=table.table_number,
        )

    @staticmethod
    def _preselected_table(uow: UnitOfWork, tenant_id: TenantId, table_id: TableId) -> Table:
        table = uow.tables.get(tenant_id=tenant_id, table_id=table_id)
        if table is None:
            raise TableUnavailableError(
                f"table {table_id} does not exist",
                details={"tableId": str(table_id), "reason": "not_found"},
            )
        return table
