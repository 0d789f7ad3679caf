from __future__ import annotations

from datetime import datetime
from typing import Callable

from octopoz.application.dto.requests import UpdateReservationStatusRequest
from octopoz.application.dto.responses import ReservationResponse
from octopoz.application.errors import (
    InvalidReservationTransitionError,
    ReservationNotFoundError,
)
from octopoz.application.mappers.event_envelope import (
    events_channel,
    serialize_reservation_status_changed,
)
from octopoz.application.mappers.reservation_mapper import to_reservation_response
from octopoz.application.ports.publisher import EventPublisher
from octopoz.application.ports.repositories import (
    OptimisticConcurrencyError,
    UnitOfWork,
    UnitOfWorkFactory,
)
from octopoz.application.transactions import RetryPolicy, run_in_transaction
from octopoz.application.use_cases.context import TraceContext, publish_after_commit, utcnow
from octopoz.domain.common.ids import ReservationId, TenantId
from octopoz.domain.reservation.entities import Reservation, ReservationTransitionError
from octopoz.domain.reservation.events import ReservationStatusChanged
from octopoz.domain.table.entities import Table


class UpdateReservationStatus:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        publisher: EventPublisher,
        retry_policy: RetryPolicy | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._publisher = publisher
        self._retry_policy = retry_policy
        self._clock = clock

    def execute(
        self,
        tenant_id: TenantId,
        reservation_id: ReservationId,
        request_dto: UpdateReservationStatusRequest,
        trace_ctx: TraceContext,
    ) -> ReservationResponse:
        def _work(uow: UnitOfWork) -> tuple[Reservation, Reservation, Table | None]:
            reservation = uow.reservations.get(tenant_id=tenant_id, reservation_id=reservation_id)
            if reservation is None:
                raise ReservationNotFoundError(f"reservation {reservation_id} not found")
            try:
                updated = reservation.transition_to(request_dto.status)
            except ReservationTransitionError as exc:
                raise InvalidReservationTransitionError(str(exc)) from exc

            try:
                uow.reservations.update_status(
                    reservation_id=reservation_id,
                    expected_status=reservation.status,
                    new_status=updated.status,
                )
            except OptimisticConcurrencyError as exc:
                raise InvalidReservationTransitionError(
                    f"reservation {reservation_id} was changed concurrently"
                ) from exc
            table = uow.tables.get(tenant_id=tenant_id, table_id=updated.table_id)
            return reservation, updated, table

        reservation, updated, table = run_in_transaction(
            self._uow_factory,
            _work,
            operation="update_reservation_status",
            retry_policy=self._retry_policy,
        )

        event = ReservationStatusChanged(
            reservation_id=updated.reservation_id,
            tenant_id=updated.tenant_id,
            from_status=reservation.status,
            to_status=updated.status,
            occurred_at=self._clock(),
        )
        publish_after_commit(
            self._publisher,
            channel=events_channel(str(tenant_id)),
            message=serialize_reservation_status_changed(
                event=event,
                reservation=updated,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_reservation_response(updated, table.table_number if table else None)
