from __future__ import annotations

from octopoz.application.dto.responses import OrderStatusResponse
from octopoz.application.errors import OrderNotFoundError
from octopoz.application.mappers.order_mapper import to_order_status_response
from octopoz.application.ports.repositories import UnitOfWorkFactory
from octopoz.application.transactions import RetryPolicy, run_in_transaction
from octopoz.domain.common.ids import OrderId, TenantId


class GetOrderStatus:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._retry_policy = retry_policy

    def execute(self, tenant_id: TenantId, order_id: OrderId) -> OrderStatusResponse:
        order = run_in_transaction(
            self._uow_factory,
            lambda uow: uow.orders.get(tenant_id=tenant_id, order_id=order_id),
            operation="get_order_status",
            retry_policy=self._retry_policy,
            read_only=True,
        )
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        return to_order_status_response(order)
