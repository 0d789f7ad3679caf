from __future__ import annotations

from datetime import datetime
from typing import Callable

from octopoz.application.dto.requests import UpdateOrderStatusRequest
from octopoz.application.dto.responses import OrderStatusResponse
from octopoz.application.errors import (
    InvalidOrderTransitionError,
    OrderNotFoundError,
    OrderVersionConflictError,
)
from octopoz.application.mappers.event_envelope import (
    events_channel,
    serialize_order_status_changed,
)
from octopoz.application.mappers.order_mapper import to_order_status_response
from octopoz.application.metrics.engine_metrics import record_order_transition
from octopoz.application.ports.publisher import EventPublisher
from octopoz.application.ports.repositories import (
    OptimisticConcurrencyError,
    UnitOfWork,
    UnitOfWorkFactory,
)
from octopoz.application.transactions import RetryPolicy, run_in_transaction
from octopoz.application.use_cases.context import TraceContext, publish_after_commit, utcnow
from octopoz.domain.common.ids import OrderId, TenantId
from octopoz.domain.order.entities import Order, OrderTransitionError
from octopoz.domain.order.events import OrderStatusChanged


class UpdateOrderStatus:
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
        order_id: OrderId,
        request_dto: UpdateOrderStatusRequest,
        trace_ctx: TraceContext,
    ) -> OrderStatusResponse:
        def _work(uow: UnitOfWork) -> tuple[Order, Order | None]:
            order = uow.orders.get(tenant_id=tenant_id, order_id=order_id)
            if order is None:
                raise OrderNotFoundError(f"order {order_id} not found")

            expected_version = request_dto.expected_version or order.version
            if expected_version != order.version:
                raise OrderVersionConflictError(
                    f"order {order_id} is at version {order.version}, not {expected_version}",
                    details={"currentVersion": order.version},
                )
            if order.status == request_dto.status:
                return order, None

            try:
                order.transition_to(request_dto.status)
            except OrderTransitionError as exc:
                raise InvalidOrderTransitionError(str(exc)) from exc

            try:
                updated = uow.orders.update_status_with_version(
                    order_id=order_id,
                    new_status=request_dto.status,
                    expected_version=expected_version,
                )
            except OptimisticConcurrencyError as exc:
                raise OrderVersionConflictError(
                    f"order {order_id} was changed concurrently", details={}
                ) from exc
            return order, updated

        order, updated = run_in_transaction(
            self._uow_factory,
            _work,
            operation="update_order_status",
            retry_policy=self._retry_policy,
        )
        if updated is None:
            return to_order_status_response(order)

        record_order_transition(order.status.value, updated.status.value)
        event = OrderStatusChanged(
            order_id=updated.order_id,
            tenant_id=updated.tenant_id,
            from_status=order.status,
            to_status=updated.status,
            occurred_at=self._clock(),
        )
        publish_after_commit(
            self._publisher,
            channel=events_channel(str(tenant_id)),
            message=serialize_order_status_changed(
                event=event,
                order=updated,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_order_status_response(updated)
