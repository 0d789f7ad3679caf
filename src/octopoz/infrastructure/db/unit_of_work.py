from __future__ import annotations

from types import TracebackType

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from octopoz.application.ports.repositories import TransientConflictError, UnitOfWork
from octopoz.infrastructure.db.errors import is_transient_db_error
from octopoz.infrastructure.db.repositories.counter_repo import SqlAlchemyCounterStore
from octopoz.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from octopoz.infrastructure.db.repositories.promotion_repo import SqlAlchemyPromotionRepository
from octopoz.infrastructure.db.repositories.reservation_repo import (
    SqlAlchemyReservationRepository,
)
from octopoz.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from octopoz.infrastructure.db.repositories.tenant_repo import SqlAlchemyTenantRepository
from octopoz.infrastructure.db.session import READ_ONLY_OPTION, get_engine


class SqlAlchemyUnitOfWork(UnitOfWork):
    """One database transaction shared by every repository it exposes.

    Leaving the ``with`` block without ``commit()`` rolls everything back.
    Driver errors caused by a concurrent writer are re-raised as
    TransientConflictError so callers can retry the whole unit. A read-only
    unit refuses to commit.
    """

    def __init__(self, engine: Engine | None = None, read_only: bool = False) -> None:
        engine = engine or get_engine()
        self.read_only = read_only
        if read_only:
            engine = engine.execution_options(**{READ_ONLY_OPTION: True})
        self._engine = engine
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        session = Session(self._engine, expire_on_commit=False)
        self._session = session
        self.tenants = SqlAlchemyTenantRepository(session)
        self.counters = SqlAlchemyCounterStore(session)
        self.promotions = SqlAlchemyPromotionRepository(session)
        self.tables = SqlAlchemyTableRepository(session)
        self.reservations = SqlAlchemyReservationRepository(session)
        self.orders = SqlAlchemyOrderRepository(session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self._require_session()
        try:
            session.rollback()
        finally:
            session.close()
            self._session = None
        if exc is not None and is_transient_db_error(exc):
            raise TransientConflictError(str(exc)) from exc

    def commit(self) -> None:
        if self.read_only:
            raise RuntimeError("read-only unit of work cannot commit")
        try:
            self._require_session().commit()
        except Exception as exc:
            if is_transient_db_error(exc):
                raise TransientConflictError(str(exc)) from exc
            raise

    def rollback(self) -> None:
        self._require_session().rollback()

    def _require_session(self) -> Session:
        if self._session is None:
            raise RuntimeError("unit of work is not active")
        return self._session
