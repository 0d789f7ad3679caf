from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from octopoz.api.dependencies import (
    current_trace_context,
    get_publisher,
    get_retry_policy,
    get_uow_factory,
)
from octopoz.application.dto.requests import CreateOrderRequest, UpdateOrderStatusRequest
from octopoz.application.dto.responses import (
    CreateOrderResponse,
    OrderListResponse,
    OrderStatusResponse,
)
from octopoz.application.ports.publisher import EventPublisher
from octopoz.application.ports.repositories import UnitOfWorkFactory
from octopoz.application.transactions import RetryPolicy
from octopoz.application.use_cases.context import TraceContext
from octopoz.application.use_cases.create_order import CreateOrder
from octopoz.application.use_cases.get_order_status import GetOrderStatus
from octopoz.application.use_cases.list_orders import ListOrders
from octopoz.application.use_cases.update_order_status import UpdateOrderStatus
from octopoz.domain.common.ids import OrderId, TenantId
from octopoz.domain.order.entities import OrderStatus

router = APIRouter(prefix="/v1/tenants/{tenant_id}", tags=["orders"])


@router.post(
    "/orders",
    response_model=CreateOrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    tenant_id: str,
    request_dto: CreateOrderRequest,
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    publisher: EventPublisher = Depends(get_publisher),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
    trace_ctx: TraceContext = Depends(current_trace_context),
) -> CreateOrderResponse:
    use_case = CreateOrder(uow_factory, publisher, retry_policy=retry_policy)
    return use_case.execute(TenantId(tenant_id), request_dto, trace_ctx)


@router.get("/orders", response_model=OrderListResponse)
def list_orders(
    tenant_id: str,
    order_status: OrderStatus | None = Query(default=None, alias="status"),
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
) -> OrderListResponse:
    use_case = ListOrders(uow_factory, retry_policy)
    return use_case.execute(TenantId(tenant_id), status=order_status)


@router.get("/orders/{order_id}/status", response_model=OrderStatusResponse)
def get_order_status(
    tenant_id: str,
    order_id: str,
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
) -> OrderStatusResponse:
    use_case = GetOrderStatus(uow_factory, retry_policy)
    return use_case.execute(TenantId(tenant_id), OrderId(order_id))


@router.patch("/orders/{order_id}/status", response_model=OrderStatusResponse)
def update_order_status(
    tenant_id: str,
    order_id: str,
    request_dto: UpdateOrderStatusRequest,
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    publisher: EventPublisher = Depends(get_publisher),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
    trace_ctx: TraceContext = Depends(current_trace_context),
) -> OrderStatusResponse:
    use_case = UpdateOrderStatus(uow_factory, publisher, retry_policy=retry_policy)
    return use_case.execute(TenantId(tenant_id), OrderId(order_id), request_dto, trace_ctx)
