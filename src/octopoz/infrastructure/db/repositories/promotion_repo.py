from __future__ import annotations

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from octopoz.application.ports.repositories import PromotionRepository
from octopoz.domain.common.ids import PromotionId, TenantId
from octopoz.domain.promotion.entities import Promotion
from octopoz.infrastructure.db.models.promotion import PromotionModel
from octopoz.infrastructure.db.repositories.conversions import as_utc


class SqlAlchemyPromotionRepository(PromotionRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, tenant_id: TenantId, promotion_id: PromotionId) -> Promotion | None:
        statement = select(PromotionModel).where(
            PromotionModel.id == str(promotion_id),
            PromotionModel.tenant_id == str(tenant_id),
        )
        model = self._session.execute(
            statement, execution_options={"populate_existing": True}
        ).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def increment_usage_if_available(
        self,
        tenant_id: TenantId,
        promotion_id: PromotionId,
    ) -> int | None:
        statement = (
            update(PromotionModel)
            .where(
                PromotionModel.id == str(promotion_id),
                PromotionModel.tenant_id == str(tenant_id),
                PromotionModel.active.is_(True),
                or_(
                    PromotionModel.usage_limit.is_(None),
                    PromotionModel.used_count < PromotionModel.usage_limit,
                ),
            )
            .values(used_count=PromotionModel.used_count + 1)
            .returning(PromotionModel.used_count)
            .execution_options(synchronize_session=False)
        )
        return self._session.execute(statement).scalar_one_or_none()

    def list_for_tenant(self, tenant_id: TenantId) -> list[Promotion]:
        statement = (
            select(PromotionModel)
            .where(PromotionModel.tenant_id == str(tenant_id))
            .order_by(PromotionModel.end_date.asc(), PromotionModel.id.asc())
        )
        models = self._session.execute(statement).scalars().all()
        return [self._to_domain(model) for model in models]

    @staticmethod
    def _to_domain(model: PromotionModel) -> Promotion:
        return Promotion(
            promotion_id=PromotionId(model.id),
            tenant_id=TenantId(model.tenant_id),
            name=model.name,
            promotion_type=model.type,
            discount_value=model.discount_value,
            usage_limit=model.usage_limit,
            used_count=model.used_count,
            active=model.active,
            start_date=as_utc(model.start_date),
            end_date=as_utc(model.end_date),
        )
