from __future__ import annotations

from octopoz.application.dto.responses import OrderListResponse
from octopoz.application.mappers.order_mapper import to_order_summary_response
from octopoz.application.ports.repositories import UnitOfWork, UnitOfWorkFactory
from octopoz.application.transactions import RetryPolicy, run_in_transaction
from octopoz.application.use_cases.tenant_guard import load_tenant
from octopoz.domain.common.ids import TenantId
from octopoz.domain.order.entities import Order, OrderStatus


class ListOrders:
    """Staff view of a tenant's orders, newest first, optionally filtered by status."""

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
        status: OrderStatus | None = None,
    ) -> OrderListResponse:
        def _work(uow: UnitOfWork) -> list[Order]:
            load_tenant(uow.tenants, tenant_id)
            return uow.orders.list_for_tenant(tenant_id, status)

        orders = run_in_transaction(
            self._uow_factory,
            _work,
            operation="list_orders",
            retry_policy=self._retry_policy,
            read_only=True,
        )
        return OrderListResponse(orders=[to_order_summary_response(order) for order in orders])
