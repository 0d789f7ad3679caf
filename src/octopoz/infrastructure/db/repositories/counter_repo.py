from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from octopoz.application.ports.repositories import CounterStore
from octopoz.domain.tenant.entities import CounterKey
from octopoz.infrastructure.db.dialect import insert_if_absent
from octopoz.infrastructure.db.models.tenant import OrderCounterModel


class SqlAlchemyCounterStore(CounterStore):
    """Per-tenant counters backed by single-row conditional updates.

    Every increment is one ``UPDATE ... RETURNING`` so the read and the write
    cannot interleave with another transaction's increment of the same row.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def increment_if_below(self, key: CounterKey, limit: int) -> int | None:
        self._ensure_row(key)
        statement = (
            update(OrderCounterModel)
            .where(*self._key_clause(key), OrderCounterModel.value < limit)
            .values(value=OrderCounterModel.value + 1, updated_at=func.now())
            .returning(OrderCounterModel.value)
            .execution_options(synchronize_session=False)
        )
        return self._session.execute(statement).scalar_one_or_none()

    def increment(self, key: CounterKey) -> int:
        self._ensure_row(key)
        statement = (
            update(OrderCounterModel)
            .where(*self._key_clause(key))
            .values(value=OrderCounterModel.value + 1, updated_at=func.now())
            .returning(OrderCounterModel.value)
            .execution_options(synchronize_session=False)
        )
        return self._session.execute(statement).scalar_one()

    def current(self, key: CounterKey) -> int:
        statement = select(OrderCounterModel.value).where(*self._key_clause(key))
        value = self._session.execute(statement).scalar_one_or_none()
        return value or 0

    def _ensure_row(self, key: CounterKey) -> None:
        insert_if_absent(
            self._session,
            OrderCounterModel,
            values={
                "tenant_id": str(key.tenant_id),
                "period_kind": key.period_kind.value,
                "period_value": key.period_value,
                "value": 0,
            },
            index_elements=["tenant_id", "period_kind", "period_value"],
        )

    @staticmethod
    def _key_clause(key: CounterKey) -> tuple:
        return (
            OrderCounterModel.tenant_id == str(key.tenant_id),
            OrderCounterModel.period_kind == key.period_kind.value,
            OrderCounterModel.period_value == key.period_value,
        )
