from __future__ import annotations

from datetime import date
from types import TracebackType
from typing import Protocol

from octopoz.domain.common.ids import OrderId, PromotionId, ReservationId, TableId, TenantId
from octopoz.domain.order.entities import Order, OrderStatus
from octopoz.domain.promotion.entities import Promotion
from octopoz.domain.reservation.entities import Reservation, ReservationStatus
from octopoz.domain.table.entities import Table
from octopoz.domain.tenant.entities import CounterKey, Tenant


class TenantRepository(Protocol):
    def get(self, tenant_id: TenantId) -> Tenant | None: ...


class CounterStore(Protocol):
    def increment_if_below(self, key: CounterKey, limit: int) -> int | None:
        """Atomically add one while the stored value is below ``limit``.

        Returns the new value, or None when the limit was already reached (the
        stored value is then left unchanged).
        """
        ...

    def increment(self, key: CounterKey) -> int: ...

    def current(self, key: CounterKey) -> int: ...


class PromotionRepository(Protocol):
    def get(self, tenant_id: TenantId, promotion_id: PromotionId) -> Promotion | None: ...

    def increment_usage_if_available(
        self,
        tenant_id: TenantId,
        promotion_id: PromotionId,
    ) -> int | None: ...

    def list_for_tenant(self, tenant_id: TenantId) -> list[Promotion]: ...


class TableRepository(Protocol):
    def get(self, tenant_id: TenantId, table_id: TableId) -> Table | None: ...

    def lock(self, tenant_id: TenantId, table_id: TableId) -> Table | None: ...

    def list_for_tenant(self, tenant_id: TenantId) -> list[Table]: ...


class ReservationRepository(Protocol):
    def add(self, reservation: Reservation) -> None: ...

    def get(self, tenant_id: TenantId, reservation_id: ReservationId) -> Reservation | None: ...

    def list_for_date(
        self,
        tenant_id: TenantId,
        reservation_date: date,
        table_id: TableId | None = None,
    ) -> list[Reservation]: ...

    def list_for_tenant(
        self,
        tenant_id: TenantId,
        reservation_date: date | None,
        status: ReservationStatus | None,
    ) -> list[Reservation]: ...

    def update_status(
        self,
        reservation_id: ReservationId,
        expected_status: ReservationStatus,
        new_status: ReservationStatus,
    ) -> None: ...


class OrderRepository(Protocol):
    def add(self, order: Order) -> None: ...

    def get(self, tenant_id: TenantId, order_id: OrderId) -> Order | None: ...

    def list_for_tenant(
        self,
        tenant_id: TenantId,
        status: OrderStatus | None = None,
    ) -> list[Order]:
        """Newest first."""
        ...

    def update_status_with_version(
        self,
        order_id: OrderId,
        new_status: OrderStatus,
        expected_version: int,
    ) -> Order: ...


class UnitOfWork(Protocol):
    tenants: TenantRepository
    counters: CounterStore
    promotions: PromotionRepository
    tables: TableRepository
    reservations: ReservationRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Opens a unit of work; read-only units never write and may skip write locks."""

    def __call__(self, read_only: bool = False) -> UnitOfWork: ...


class OptimisticConcurrencyError(Exception):
    pass


class TransientConflictError(Exception):
    """The store aborted the transaction because it lost a race with another writer."""
