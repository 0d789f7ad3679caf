from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from octopoz.application.ports.repositories import TableRepository
from octopoz.domain.common.ids import TableId, TenantId
from octopoz.domain.table.entities import Table, TableStatus
from octopoz.infrastructure.db.models.table import TableModel


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, tenant_id: TenantId, table_id: TableId) -> Table | None:
        model = self._session.execute(self._by_id(tenant_id, table_id)).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def lock(self, tenant_id: TenantId, table_id: TableId) -> Table | None:
        # Row lock on PostgreSQL; SQLite already holds the database write lock.
        statement = self._by_id(tenant_id, table_id).with_for_update()
        model = self._session.execute(
            statement, execution_options={"populate_existing": True}
        ).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def list_for_tenant(self, tenant_id: TenantId) -> list[Table]:
        statement = (
            select(TableModel)
            .where(TableModel.tenant_id == str(tenant_id))
            .order_by(TableModel.table_number.asc())
        )
        models = self._session.execute(statement).scalars().all()
        return [self._to_domain(model) for model in models]

    @staticmethod
    def _by_id(tenant_id: TenantId, table_id: TableId):
        return select(TableModel).where(
            TableModel.id == str(table_id),
            TableModel.tenant_id == str(tenant_id),
        )

    @staticmethod
    def _to_domain(model: TableModel) -> Table:
        return Table(
            table_id=TableId(model.id),
            tenant_id=TenantId(model.tenant_id),
            table_number=model.table_number,
            capacity=model.capacity,
            status=TableStatus(model.status),
        )
