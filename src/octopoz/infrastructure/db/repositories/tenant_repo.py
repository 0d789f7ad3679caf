from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from octopoz.application.ports.repositories import TenantRepository
from octopoz.domain.common.ids import TenantId
from octopoz.domain.tenant.entities import Tenant, TenantStatus
from octopoz.infrastructure.db.models.tenant import TenantModel


class SqlAlchemyTenantRepository(TenantRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, tenant_id: TenantId) -> Tenant | None:
        statement = select(TenantModel).where(TenantModel.id == str(tenant_id)).limit(1)
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return Tenant(
            tenant_id=TenantId(model.id),
            name=model.name,
            monthly_capacity=model.monthly_capacity,
            status=TenantStatus(model.status),
        )
