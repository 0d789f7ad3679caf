from __future__ import annotations

from datetime import date

from octopoz.application.dto.responses import AvailableSlotsResponse
from octopoz.application.ports.repositories import UnitOfWork, UnitOfWorkFactory
from octopoz.application.services.table_allocator import TableAllocator
from octopoz.application.transactions import RetryPolicy, run_in_transaction
from octopoz.application.use_cases.tenant_guard import load_active_tenant
from octopoz.domain.common.ids import TenantId
from octopoz.domain.table.allocation import SlotPolicy


class ListAvailableSlots:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        slot_policy: SlotPolicy | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._slot_policy = slot_policy or SlotPolicy()
        self._retry_policy = retry_policy

    def execute(
        self,
        tenant_id: TenantId,
        reservation_date: date,
        party_size: int,
    ) -> AvailableSlotsResponse:
        if party_size < 1:
            raise ValueError("party_size must be >= 1")

        def _work(uow: UnitOfWork) -> list[str]:
            load_active_tenant(uow.tenants, tenant_id)
            allocator = TableAllocator(uow.tables, uow.reservations, self._slot_policy)
            return allocator.compute_available_slots(tenant_id, reservation_date, party_size)

        slots = run_in_transaction(
            self._uow_factory,
            _work,
            operation="list_available_slots",
            retry_policy=self._retry_policy,
            read_only=True,
        )
        return AvailableSlotsResponse(
            reservationDate=reservation_date,
            partySize=party_size,
            availableSlots=slots,
        )
