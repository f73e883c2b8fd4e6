from __future__ import annotations

from rrs.application.dto.responses import ReservationResponse
from rrs.domain.reservation.entities import Reservation


def to_reservation_response(reservation: Reservation) -> ReservationResponse:
    return ReservationResponse(
        reservationId=str(reservation.reservation_id),
        customerId=str(reservation.customer_id),
        tableId=str(reservation.table_id),
        reservationDate=reservation.reservation_date,
        reservationTime=reservation.reservation_time,
        partySize=reservation.party_size,
        status=reservation.status.value,
        durationMinutes=reservation.duration_minutes,
        notes=reservation.notes,
        createdAt=reservation.created_at,
    )
