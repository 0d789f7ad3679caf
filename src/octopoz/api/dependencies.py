from __future__ import annotations

from octopoz.api.middleware.request_id import get_request_id
from octopoz.application.ports.publisher import EventPublisher
from octopoz.application.ports.repositories import UnitOfWorkFactory
from octopoz.application.transactions import RetryPolicy
from octopoz.application.use_cases.context import TraceContext
from octopoz.domain.table.allocation import SlotPolicy
from octopoz.infrastructure.config import load_retry_policy, load_slot_policy
from octopoz.infrastructure.db.session import get_engine
from octopoz.infrastructure.db.unit_of_work import SqlAlchemyUnitOfWork
from octopoz.infrastructure.messaging.redis_publisher import RedisEventPublisher
from octopoz.infrastructure.observability.otel import current_trace_id


def get_uow_factory() -> UnitOfWorkFactory:
    engine = get_engine()

    def _open(read_only: bool = False) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(engine, read_only=read_only)

    return _open


def get_publisher() -> EventPublisher:
    return RedisEventPublisher()


def get_slot_policy() -> SlotPolicy:
    return load_slot_policy()


def get_retry_policy() -> RetryPolicy:
    return load_retry_policy()


def current_trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())
