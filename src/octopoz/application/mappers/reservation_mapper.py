from __future__ import annotations

from octopoz.application.dto.responses import ReservationResponse
from octopoz.domain.reservation.entities import Reservation
from octopoz.domain.table.allocation import format_slot


def to_reservation_response(
    reservation: Reservation,
    table_number: int | None,
) -> ReservationResponse:
    return ReservationResponse(
        reservationId=str(reservation.reservation_id),
        tableId=str(reservation.table_id),
        tableNumber=table_number,
        customerName=reservation.customer.name,
        customerEmail=reservation.customer.email,
        customerPhone=reservation.customer.phone,
        partySize=reservation.party_size,
        reservationDate=reservation.reservation_date,
        reservationTime=format_slot(reservation.reservation_time),
        status=reservation.status.value,
        specialRequests=reservation.special_requests,
        createdAt=reservation.created_at,
    )
