from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from octopoz.api.dependencies import (
    current_trace_context,
    get_publisher,
    get_retry_policy,
    get_slot_policy,
    get_uow_factory,
)
from octopoz.application.dto.requests import (
    CreateReservationRequest,
    UpdateReservationStatusRequest,
)
from octopoz.application.dto.responses import (
    AvailableSlotsResponse,
    CreateReservationResponse,
    ReservationListResponse,
    ReservationResponse,
)
from octopoz.application.ports.publisher import EventPublisher
from octopoz.application.ports.repositories import UnitOfWorkFactory
from octopoz.application.transactions import RetryPolicy
from octopoz.application.use_cases.context import TraceContext
from octopoz.application.use_cases.create_reservation import CreateReservation
from octopoz.application.use_cases.list_available_slots import ListAvailableSlots
from octopoz.application.use_cases.list_reservations import ListReservations
from octopoz.application.use_cases.update_reservation_status import UpdateReservationStatus
from octopoz.domain.common.ids import ReservationId, TenantId
from octopoz.domain.reservation.entities import ReservationStatus
from octopoz.domain.table.allocation import SlotPolicy

router = APIRouter(prefix="/v1/tenants/{tenant_id}", tags=["reservations"])


@router.get("/available-slots", response_model=AvailableSlotsResponse)
def list_available_slots(
    tenant_id: str,
    reservation_date: date = Query(alias="date"),
    party_size: int = Query(alias="partySize", ge=1),
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    slot_policy: SlotPolicy = Depends(get_slot_policy),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
) -> AvailableSlotsResponse:
    use_case = ListAvailableSlots(uow_factory, slot_policy, retry_policy)
    return use_case.execute(TenantId(tenant_id), reservation_date, party_size)


@router.post(
    "/reservations",
    response_model=CreateReservationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reservation(
    tenant_id: str,
    request_dto: CreateReservationRequest,
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    publisher: EventPublisher = Depends(get_publisher),
    slot_policy: SlotPolicy = Depends(get_slot_policy),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
    trace_ctx: TraceContext = Depends(current_trace_context),
) -> CreateReservationResponse:
    use_case = CreateReservation(
        uow_factory,
        publisher,
        slot_policy=slot_policy,
        retry_policy=retry_policy,
    )
    return use_case.execute(TenantId(tenant_id), request_dto, trace_ctx)


@router.get("/reservations", response_model=ReservationListResponse)
def list_reservations(
    tenant_id: str,
    reservation_date: date | None = Query(default=None, alias="date"),
    reservation_status: ReservationStatus | None = Query(default=None, alias="status"),
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
) -> ReservationListResponse:
    return ListReservations(uow_factory, retry_policy).execute(
        TenantId(tenant_id),
        reservation_date=reservation_date,
        status=reservation_status,
    )


@router.patch("/reservations/{reservation_id}", response_model=ReservationResponse)
def update_reservation_status(
    tenant_id: str,
    reservation_id: str,
    request_dto: UpdateReservationStatusRequest,
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    publisher: EventPublisher = Depends(get_publisher),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
    trace_ctx: TraceContext = Depends(current_trace_context),
) -> ReservationResponse:
    use_case = UpdateReservationStatus(uow_factory, publisher, retry_policy=retry_policy)
    return use_case.execute(
        TenantId(tenant_id),
        ReservationId(reservation_id),
        request_dto,
        trace_ctx,
    )
