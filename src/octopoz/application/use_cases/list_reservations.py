from __future__ import annotations

from datetime import date

from octopoz.application.dto.responses import ReservationListResponse
from octopoz.application.mappers.reservation_mapper import to_reservation_response
from octopoz.application.ports.repositories import UnitOfWork, UnitOfWorkFactory
from octopoz.application.transactions import RetryPolicy, run_in_transaction
from octopoz.domain.common.ids import TenantId
from octopoz.domain.reservation.entities import Reservation, ReservationStatus


class ListReservations:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._retry_policy = retry_policy

    def execute(
        self,
        tenant_id: TenantId,
        reservation_date: date | None = None,
        status: ReservationStatus | None = None,
    ) -> ReservationListResponse:
        def _work(uow: UnitOfWork) -> tuple[list[Reservation], dict]:
            reservations = uow.reservations.list_for_tenant(tenant_id, reservation_date, status)
            tables = uow.tables.list_for_tenant(tenant_id)
            return reservations, {table.table_id: table.table_number for table in tables}

        reservations, table_numbers = run_in_transaction(
            self._uow_factory,
            _work,
            operation="list_reservations",
            retry_policy=self._retry_policy,
            read_only=True,
        )
        return ReservationListResponse(
            reservations=[
                to_reservation_response(reservation, table_numbers.get(reservation.table_id))
                for reservation in reservations
            ]
        )
