from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from octopoz.application.ports.repositories import OptimisticConcurrencyError, OrderRepository
from octopoz.domain.common.customer import CustomerInfo
from octopoz.domain.common.ids import OrderId, PromotionId, TableId, TenantId
from octopoz.domain.common.money import Money
from octopoz.domain.order.entities import Order, OrderItem, OrderStatus, OrderTotals, OrderType
from octopoz.infrastructure.db.models.order import OrderModel
from octopoz.infrastructure.db.repositories.conversions import as_utc


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, order: Order) -> None:
        self._session.add(self._to_model(order))
        # Surface a duplicate order number inside the unit of work, not at commit.
        self._session.flush()

    def get(self, tenant_id: TenantId, order_id: OrderId) -> Order | None:
        statement = select(OrderModel).where(
            OrderModel.id == str(order_id),
            OrderModel.tenant_id == str(tenant_id),
        )
        model = self._session.execute(
            statement, execution_options={"populate_existing": True}
        ).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def list_for_tenant(
        self,
        tenant_id: TenantId,
        status: OrderStatus | None = None,
    ) -> list[Order]:
        statement = select(OrderModel).where(OrderModel.tenant_id == str(tenant_id))
        if status is not None:
            statement = statement.where(OrderModel.status == status.value)
        statement = statement.order_by(
            OrderModel.created_at.desc(), OrderModel.order_number.desc()
        )
        models = self._session.execute(statement).scalars().all()
        return [self._to_domain(model) for model in models]

    def update_status_with_version(
        self,
        order_id: OrderId,
        new_status: OrderStatus,
        expected_version: int,
    ) -> Order:
        statement = (
            update(OrderModel)
            .where(
                OrderModel.id == str(order_id),
                OrderModel.version == expected_version,
            )
            .values(
                status=new_status.value,
                version=OrderModel.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(statement)
        if result.rowcount != 1:
            raise OptimisticConcurrencyError(f"order {order_id} version conflict")

        model = self._session.execute(
            select(OrderModel).where(OrderModel.id == str(order_id)),
            execution_options={"populate_existing": True},
        ).scalar_one()
        return self._to_domain(model)

    @staticmethod
    def _to_model(order: Order) -> OrderModel:
        totals = order.totals
        return OrderModel(
            id=str(order.order_id),
            tenant_id=str(order.tenant_id),
            order_number=order.order_number,
            order_type=order.order_type.value,
            status=order.status.value,
            customer_name=order.customer.name,
            customer_email=order.customer.email,
            customer_phone=order.customer.phone,
            items=[
                {
                    "itemId": item.item_id,
                    "name": item.name,
                    "quantity": item.quantity,
                    "unitPriceCents": item.unit_price_cents,
                }
                for item in order.items
            ],
            subtotal_cents=totals.subtotal.amount_cents,
            tax_cents=totals.tax.amount_cents,
            discount_cents=totals.discount.amount_cents,
            total_cents=totals.total.amount_cents,
            currency=totals.total.currency,
            promotion_id=str(order.promotion_id) if order.promotion_id else None,
            table_id=str(order.table_id) if order.table_id else None,
            delivery_address=order.delivery_address,
            special_instructions=order.special_instructions,
            created_at=order.created_at,
            estimated_delivery_time=order.estimated_delivery_time,
            version=order.version,
        )

    @staticmethod
    def _to_domain(model: OrderModel) -> Order:
        currency = model.currency
        return Order(
            order_id=OrderId(model.id),
            tenant_id=TenantId(model.tenant_id),
            order_number=model.order_number,
            order_type=OrderType(model.order_type),
            status=OrderStatus(model.status),
            customer=CustomerInfo(
                name=model.customer_name,
                email=model.customer_email,
                phone=model.customer_phone,
            ),
            items=[
                OrderItem(
                    name=item["name"],
                    quantity=item["quantity"],
                    unit_price_cents=item["unitPriceCents"],
                    item_id=item.get("itemId"),
                )
                for item in model.items
            ],
            totals=OrderTotals(
                subtotal=Money(amount_cents=model.subtotal_cents, currency=currency),
                tax=Money(amount_cents=model.tax_cents, currency=currency),
                discount=Money(amount_cents=model.discount_cents, currency=currency),
                total=Money(amount_cents=model.total_cents, currency=currency),
            ),
            created_at=as_utc(model.created_at),
            estimated_delivery_time=as_utc(model.estimated_delivery_time),
            promotion_id=PromotionId(model.promotion_id) if model.promotion_id else None,
            table_id=TableId(model.table_id) if model.table_id else None,
            delivery_address=model.delivery_address,
            special_instructions=model.special_instructions,
            version=model.version,
        )
