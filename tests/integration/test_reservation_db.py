from __future__ import annotations

import concurrent.futures
import sys
from datetime import date, datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from rows import table_row, tenant_row

from octopoz.application.dto.requests import (
    CreateReservationRequest,
    UpdateReservationStatusRequest,
)
from octopoz.application.errors import TableUnavailableError
from octopoz.application.use_cases.context import TraceContext
from octopoz.application.use_cases.create_reservation import CreateReservation
from octopoz.application.use_cases.list_available_slots import ListAvailableSlots
from octopoz.application.use_cases.list_reservations import ListReservations
from octopoz.application.use_cases.update_reservation_status import UpdateReservationStatus
from octopoz.domain.common.ids import ReservationId, TenantId
from octopoz.domain.reservation.entities import ReservationStatus

TENANT = TenantId("tnt_001")
DAY = date(2024, 2, 10)
NOW = datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc)
TRACE = TraceContext(trace_id=None, request_id=None)


class NullPublisher:
    def publish(self, channel: str, message: str) -> None:
        return None


def _request(at: str, party_size: int = 4) -> CreateReservationRequest:
    return CreateReservationRequest.model_validate(
        {
            "customerName": "Frances Allen",
            "partySize": party_size,
            "reservationDate": DAY.isoformat(),
            "reservationTime": at,
            "specialRequests": "window seat",
        }
    )


def _create(uow_factory, at: str):
    return CreateReservation(uow_factory, NullPublisher(), clock=lambda: NOW).execute(
        TENANT, _request(at), TRACE
    )


def test_slots_disappear_around_a_booking(uow_factory, seed) -> None:
    seed(tenant_row(), table_row(1, 4))
    list_slots = ListAvailableSlots(uow_factory)

    before = list_slots.execute(TENANT, DAY, 4).availableSlots
    _create(uow_factory, "18:00")
    after = list_slots.execute(TENANT, DAY, 4).availableSlots

    assert len(before) == 22
    assert sorted(set(before) - set(after)) == [
        "16:30",
        "17:00",
        "17:30",
        "18:00",
        "18:30",
        "19:00",
        "19:30",
    ]


def test_concurrent_bookings_never_double_book_a_table(uow_factory, seed) -> None:
    seed(tenant_row(), table_row(1, 4))

    def _attempt(at: str) -> str:
        try:
            return _create(uow_factory, at).reservationId
        except TableUnavailableError:
            return "CONFLICT"

    with concurrent.futures.ThreadPoolExecutor(max_workers=4) as executor:
        results = list(executor.map(_attempt, ["19:00", "19:00", "19:30", "20:30"]))

    assert results.count("CONFLICT") == 3
    listed = ListReservations(uow_factory).execute(TENANT, reservation_date=DAY).reservations
    assert len(listed) == 1
    assert listed[0].specialRequests == "window seat"


def test_cancelled_reservation_releases_slot(uow_factory, seed) -> None:
    seed(tenant_row(), table_row(1, 4), table_row(2, 2))
    created = _create(uow_factory, "12:00")

    cancelled = UpdateReservationStatus(uow_factory, NullPublisher()).execute(
        TENANT,
        ReservationId(created.reservationId),
        UpdateReservationStatusRequest(status=ReservationStatus.CANCELLED),
        TRACE,
    )

    assert cancelled.status == "cancelled"
    assert cancelled.reservationTime == "12:00"
    assert _create(uow_factory, "12:30").tableNumber == 1
    statuses = ListReservations(uow_factory).execute(TENANT, status=ReservationStatus.CANCELLED)
    assert [r.reservationId for r in statuses.reservations] == [created.reservationId]
