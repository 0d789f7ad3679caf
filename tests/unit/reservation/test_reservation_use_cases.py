from __future__ import annotations

import json
import sys
from datetime import date, time
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fakes import NOW, FakePublisher, FakeStore

from octopoz.application.dto.requests import (
    CreateReservationRequest,
    UpdateReservationStatusRequest,
)
from octopoz.application.errors import (
    InvalidReservationTransitionError,
    NoTableAvailableError,
    ReservationNotFoundError,
    TableUnavailableError,
    TenantInactiveError,
)
from octopoz.application.use_cases.context import TraceContext
from octopoz.application.use_cases.create_reservation import CreateReservation
from octopoz.application.use_cases.list_available_slots import ListAvailableSlots
from octopoz.application.use_cases.list_reservations import ListReservations
from octopoz.application.use_cases.update_reservation_status import UpdateReservationStatus
from octopoz.domain.common.ids import ReservationId, TenantId
from octopoz.domain.reservation.entities import ReservationStatus
from octopoz.domain.tenant.entities import TenantStatus

TENANT = TenantId("tnt_001")
DAY = date(2024, 2, 10)
TRACE = TraceContext(trace_id=None, request_id="req-r")


def _request(at: str = "19:00", party_size: int = 4, **extra) -> CreateReservationRequest:
    payload = {
        "customerName": "Margaret Hamilton",
        "customerEmail": "mh@example.com",
        "partySize": party_size,
        "reservationDate": DAY.isoformat(),
        "reservationTime": at,
    }
    payload.update(extra)
    return CreateReservationRequest.model_validate(payload)


def _reserve(store: FakeStore, request: CreateReservationRequest, publisher=None):
    use_case = CreateReservation(store.uow_factory, publisher or FakePublisher(), clock=lambda: NOW)
    return use_case.execute(TENANT, request, TRACE)


def test_reservation_goes_to_best_fitting_table() -> None:
    store = FakeStore()
    store.add_tenant()
    store.add_table(1, capacity=8)
    store.add_table(2, capacity=4)
    publisher = FakePublisher()

    response = _reserve(store, _request(), publisher)

    assert response.tableNumber == 2
    assert response.message == "Reservation confirmed"
    event = json.loads(publisher.messages[0][1])
    assert event["event_type"] == "reservation.created"
    assert event["payload"]["reservationTime"] == "19:00"


def test_falls_back_to_next_table_when_best_fit_is_booked() -> None:
    store = FakeStore()
    store.add_tenant()
    store.add_table(1, capacity=4)
    store.add_table(2, capacity=6)

    first = _reserve(store, _request())
    second = _reserve(store, _request("19:30"))

    assert (first.tableNumber, second.tableNumber) == (1, 2)


def test_every_table_booked_is_a_conflict() -> None:
    store = FakeStore()
    store.add_tenant()
    store.add_table(1, capacity=4)
    store.add_table(2, capacity=4)
    _reserve(store, _request())
    _reserve(store, _request())

    with pytest.raises(TableUnavailableError) as exc_info:
        _reserve(store, _request("20:00"))
    assert exc_info.value.details["reason"] == "conflict"
    assert len(store.state.reservations) == 2


def test_party_larger_than_any_table_has_no_table() -> None:
    store = FakeStore()
    store.add_tenant()
    store.add_table(1, capacity=4)

    with pytest.raises(NoTableAvailableError):
        _reserve(store, _request(party_size=10))


def test_requested_table_is_checked_directly() -> None:
    store = FakeStore()
    store.add_tenant()
    store.add_table(1, capacity=4)
    store.add_table(2, capacity=4)

    response = _reserve(store, _request(tableId="tbl_002"))
    assert response.tableNumber == 2

    with pytest.raises(TableUnavailableError) as exc_info:
        _reserve(store, _request("18:00", tableId="tbl_002"))
    assert exc_info.value.details["reason"] == "conflict"


def test_inactive_tenant_cannot_book_or_list_slots() -> None:
    store = FakeStore()
    store.add_tenant(status=TenantStatus.INACTIVE)
    store.add_table(1, capacity=4)

    with pytest.raises(TenantInactiveError):
        _reserve(store, _request())
    with pytest.raises(TenantInactiveError):
        ListAvailableSlots(store.uow_factory).execute(TENANT, DAY, 2)


def test_booking_removes_nearby_slots() -> None:
    store = FakeStore()
    store.add_tenant()
    store.add_table(1, capacity=4)
    list_slots = ListAvailableSlots(store.uow_factory)

    before = list_slots.execute(TENANT, DAY, 4).availableSlots
    _reserve(store, _request("13:00"))
    after = list_slots.execute(TENANT, DAY, 4).availableSlots

    assert len(before) == 22
    assert "13:00" not in after
    assert "11:00" in after
    assert "11:30" not in after
    assert "14:30" not in after
    assert "15:00" in after


def test_list_reservations_filters_by_date_and_status() -> None:
    store = FakeStore()
    store.add_tenant()
    table = store.add_table(7, capacity=4)
    store.add_reservation(table, time(12, 0), reservation_id="rsv_a")
    store.add_reservation(
        table, time(20, 0), reservation_id="rsv_b", status=ReservationStatus.CANCELLED
    )
    store.add_reservation(table, time(12, 0), on=date(2024, 2, 11), reservation_id="rsv_c")
    use_case = ListReservations(store.uow_factory)

    on_day = use_case.execute(TENANT, reservation_date=DAY).reservations
    confirmed = use_case.execute(TENANT, status=ReservationStatus.CONFIRMED).reservations

    assert [r.reservationId for r in on_day] == ["rsv_a", "rsv_b"]
    assert on_day[0].tableNumber == 7
    assert on_day[0].reservationTime == "12:00"
    assert [r.reservationId for r in confirmed] == ["rsv_a", "rsv_c"]


def test_status_update_cancels_and_frees_the_slot() -> None:
    store = FakeStore()
    store.add_tenant()
    store.add_table(1, capacity=4)
    created = _reserve(store, _request())
    publisher = FakePublisher()
    use_case = UpdateReservationStatus(store.uow_factory, publisher, clock=lambda: NOW)

    response = use_case.execute(
        TENANT,
        ReservationId(created.reservationId),
        UpdateReservationStatusRequest(status=ReservationStatus.CANCELLED),
        TRACE,
    )

    assert response.status == "cancelled"
    assert response.tableNumber == 1
    assert json.loads(publisher.messages[0][1])["payload"]["fromStatus"] == "confirmed"
    assert _reserve(store, _request()).tableNumber == 1


def test_closed_reservation_cannot_change_again() -> None:
    store = FakeStore()
    store.add_tenant()
    table = store.add_table(1, capacity=4)
    store.add_reservation(
        table, time(12, 0), reservation_id="rsv_done", status=ReservationStatus.COMPLETED
    )
    use_case = UpdateReservationStatus(store.uow_factory, FakePublisher())

    with pytest.raises(InvalidReservationTransitionError):
        use_case.execute(
            TENANT,
            ReservationId("rsv_done"),
            UpdateReservationStatusRequest(status=ReservationStatus.NO_SHOW),
            TRACE,
        )
    with pytest.raises(ReservationNotFoundError):
        use_case.execute(
            TENANT,
            ReservationId("rsv_missing"),
            UpdateReservationStatusRequest(status=ReservationStatus.CANCELLED),
            TRACE,
        )
