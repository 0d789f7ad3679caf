from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable
from uuid import uuid4

from octopoz.application.dto.requests import CreateOrderRequest
from octopoz.application.dto.responses import CreateOrderResponse
from octopoz.application.errors import TableUnavailableError
from octopoz.application.mappers.event_envelope import events_channel, serialize_order_created
from octopoz.application.mappers.order_mapper import to_create_order_response
from octopoz.application.metrics.engine_metrics import record_order_admitted
from octopoz.application.ports.publisher import EventPublisher
from octopoz.application.ports.repositories import UnitOfWork, UnitOfWorkFactory
from octopoz.application.services.admission import AdmissionController
from octopoz.application.services.promotion_ledger import PromotionLedger
from octopoz.application.services.sequencer import OrderSequencer
from octopoz.application.transactions import RetryPolicy, run_in_transaction
from octopoz.application.use_cases.context import TraceContext, publish_after_commit, utcnow
from octopoz.application.use_cases.tenant_guard import load_active_tenant
from octopoz.domain.common.customer import CustomerInfo
from octopoz.domain.common.ids import OrderId, PromotionId, TableId, TenantId
from octopoz.domain.common.money import Money
from octopoz.domain.order.entities import Order, OrderItem, OrderTotals, create_new_order
from octopoz.domain.order.events import OrderCreated

logger = logging.getLogger(__name__)


class CreateOrder:
    """Admit, number, discount and persist a new order in one transaction.

    Steps run in order: tenant must be active, a slot of the monthly quota is
    claimed, the daily order number is minted, the promotion (if any) is
    redeemed, and the order row is written. Any failure rolls every step back,
    so a rejected order consumes neither quota, nor a number, nor a promotion use.
    """

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
        request_dto: CreateOrderRequest,
        trace_ctx: TraceContext,
    ) -> CreateOrderResponse:
        started_at = self._clock()
        business_day = started_at.date()

        def _work(uow: UnitOfWork) -> Order:
            tenant = load_active_tenant(uow.tenants, tenant_id)
            AdmissionController(uow.counters).reserve_capacity(tenant, business_day)
            order_number = OrderSequencer(uow.counters).next_order_number(tenant_id, business_day)

            promotion_id = (
                PromotionId(request_dto.promotion_id) if request_dto.promotion_id else None
            )
            if promotion_id is not None:
                PromotionLedger(uow.promotions).apply_usage(tenant_id, promotion_id, started_at)

            table_id = TableId(request_dto.table_id) if request_dto.table_id else None
            if table_id is not None and uow.tables.get(tenant_id, table_id) is None:
                raise TableUnavailableError(
                    f"table {table_id} does not exist",
                    details={"tableId": str(table_id), "reason": "not_found"},
                )

            order = _build_order(
                tenant_id=tenant_id,
                order_number=order_number,
                request_dto=request_dto,
                promotion_id=promotion_id,
                table_id=table_id,
                now=started_at,
            )
            uow.orders.add(order)
            return order

        order = run_in_transaction(
            self._uow_factory,
            _work,
            operation="create_order",
            retry_policy=self._retry_policy,
        )

        record_order_admitted(str(tenant_id), order.order_type.value)
        logger.info(
            "order_created",
            extra={
                "tenant_id": str(tenant_id),
                "order_id": str(order.order_id),
                "order_number": order.order_number,
            },
        )
        event = OrderCreated(
            order_id=order.order_id,
            tenant_id=order.tenant_id,
            order_number=order.order_number,
            occurred_at=order.created_at,
        )
        publish_after_commit(
            self._publisher,
            channel=events_channel(str(tenant_id)),
            message=serialize_order_created(
                event=event,
                order=order,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_create_order_response(order)


def _build_order(
    *,
    tenant_id: TenantId,
    order_number: str,
    request_dto: CreateOrderRequest,
    promotion_id: PromotionId | None,
    table_id: TableId | None,
    now: datetime,
) -> Order:
    currency = request_dto.currency
    totals = OrderTotals(
        subtotal=Money(amount_cents=request_dto.subtotal_cents, currency=currency),
        tax=Money(amount_cents=request_dto.tax_cents, currency=currency),
        discount=Money(amount_cents=request_dto.discount_cents, currency=currency),
        total=Money(amount_cents=request_dto.total_cents, currency=currency),
    )
    items = [
        OrderItem(
            name=item.name,
            quantity=item.quantity,
            unit_price_cents=item.price_cents,
            item_id=item.item_id,
        )
        for item in request_dto.items
    ]
    return create_new_order(
        order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
        tenant_id=tenant_id,
        order_number=order_number,
        order_type=request_dto.order_type,
        customer=CustomerInfo(
            name=request_dto.customer_name,
            email=request_dto.customer_email,
            phone=request_dto.customer_phone,
        ),
        items=items,
        totals=totals,
        now=now,
        promotion_id=promotion_id,
        table_id=table_id,
        delivery_address=request_dto.delivery_address,
        special_instructions=request_dto.special_instructions,
    )
