from __future__ import annotations

from datetime import date

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from octopoz.application.ports.repositories import (
    OptimisticConcurrencyError,
    ReservationRepository,
)
from octopoz.domain.common.customer import CustomerInfo
from octopoz.domain.common.ids import ReservationId, TableId, TenantId
from octopoz.domain.reservation.entities import Reservation, ReservationStatus
from octopoz.infrastructure.db.models.table import ReservationModel
from octopoz.infrastructure.db.repositories.conversions import as_utc


class SqlAlchemyReservationRepository(ReservationRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, reservation: Reservation) -> None:
        self._session.add(
            ReservationModel(
                id=str(reservation.reservation_id),
                tenant_id=str(reservation.tenant_id),
                table_id=str(reservation.table_id),
                customer_name=reservation.customer.name,
                customer_email=reservation.customer.email,
                customer_phone=reservation.customer.phone,
                party_size=reservation.party_size,
                reservation_date=reservation.reservation_date,
                reservation_time=reservation.reservation_time,
                special_requests=reservation.special_requests,
                status=reservation.status.value,
                created_at=reservation.created_at,
            )
        )
        self._session.flush()

    def get(self, tenant_id: TenantId, reservation_id: ReservationId) -> Reservation | None:
        statement = select(ReservationModel).where(
            ReservationModel.id == str(reservation_id),
            ReservationModel.tenant_id == str(tenant_id),
        )
        model = self._session.execute(
            statement, execution_options={"populate_existing": True}
        ).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def list_for_date(
        self,
        tenant_id: TenantId,
        reservation_date: date,
        table_id: TableId | None = None,
    ) -> list[Reservation]:
        statement = select(ReservationModel).where(
            ReservationModel.tenant_id == str(tenant_id),
            ReservationModel.reservation_date == reservation_date,
            ReservationModel.status != ReservationStatus.CANCELLED.value,
        )
        if table_id is not None:
            statement = statement.where(ReservationModel.table_id == str(table_id))
        statement = statement.order_by(ReservationModel.reservation_time.asc())
        models = self._session.execute(statement).scalars().all()
        return [self._to_domain(model) for model in models]

    def list_for_tenant(
        self,
        tenant_id: TenantId,
        reservation_date: date | None,
        status: ReservationStatus | None,
    ) -> list[Reservation]:
        statement = select(ReservationModel).where(ReservationModel.tenant_id == str(tenant_id))
        if reservation_date is not None:
            statement = statement.where(ReservationModel.reservation_date == reservation_date)
        if status is not None:
            statement = statement.where(ReservationModel.status == status.value)
        statement = statement.order_by(
            ReservationModel.reservation_date.asc(),
            ReservationModel.reservation_time.asc(),
            ReservationModel.id.asc(),
        )
        models = self._session.execute(statement).scalars().all()
        return [self._to_domain(model) for model in models]

    def update_status(
        self,
        reservation_id: ReservationId,
        expected_status: ReservationStatus,
        new_status: ReservationStatus,
    ) -> None:
        statement = (
            update(ReservationModel)
            .where(
                ReservationModel.id == str(reservation_id),
                ReservationModel.status == expected_status.value,
            )
            .values(status=new_status.value)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(statement)
        if result.rowcount != 1:
            raise OptimisticConcurrencyError(
                f"reservation {reservation_id} is no longer {expected_status.value}"
            )

    @staticmethod
    def _to_domain(model: ReservationModel) -> Reservation:
        return Reservation(
            reservation_id=ReservationId(model.id),
            tenant_id=TenantId(model.tenant_id),
            table_id=TableId(model.table_id),
            customer=CustomerInfo(
                name=model.customer_name,
                email=model.customer_email,
                phone=model.customer_phone,
            ),
            party_size=model.party_size,
            reservation_date=model.reservation_date,
            reservation_time=model.reservation_time,
            status=ReservationStatus(model.status),
            created_at=as_utc(model.created_at),
            special_requests=model.special_requests,
        )
