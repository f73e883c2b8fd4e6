from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Body, Depends, Query, status

from rrs.api.dependencies import get_reservation_lifecycle, trace_context
from rrs.application.dto.requests import CreateReservationRequest, ReservationTransitionRequest
from rrs.application.dto.responses import ReservationListResponse, ReservationResponse
from rrs.application.mappers.reservation_mapper import to_reservation_response
from rrs.application.use_cases.reservation_lifecycle import ReservationLifecycle
from rrs.domain.common.ids import CustomerId, ReservationId, TableId

router = APIRouter()


@router.post(
    "/v1/reservations",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reservation(
    request_dto: CreateReservationRequest,
    lifecycle: ReservationLifecycle = Depends(get_reservation_lifecycle),
) -> ReservationResponse:
    trace_ctx = trace_context()
    if request_dto.table_id:
        reservation_id = lifecycle.create(
            customer_id=CustomerId(request_dto.customer_id),
            table_id=TableId(request_dto.table_id),
            reservation_date=request_dto.reservation_date,
            reservation_time=request_dto.reservation_time,
            party_size=request_dto.party_size,
            duration_minutes=request_dto.duration_minutes,
            notes=request_dto.notes,
            confirmed=request_dto.confirmed,
            trace_ctx=trace_ctx,
        )
    else:
        reservation_id = lifecycle.book(
            customer_id=CustomerId(request_dto.customer_id),
            reservation_date=request_dto.reservation_date,
            reservation_time=request_dto.reservation_time,
            party_size=request_dto.party_size,
            duration_minutes=request_dto.duration_minutes,
            notes=request_dto.notes,
            confirmed=request_dto.confirmed,
            trace_ctx=trace_ctx,
        )
    return to_reservation_response(lifecycle.get(reservation_id))


@router.get("/v1/reservations", response_model=ReservationListResponse)
def list_reservations(
    on_date: date | None = Query(default=None, alias="date"),
    from_date: date | None = Query(default=None, alias="fromDate"),
    lifecycle: ReservationLifecycle = Depends(get_reservation_lifecycle),
) -> ReservationListResponse:
    if on_date is not None:
        reservations = lifecycle.list_for_date(on_date)
    else:
        reservations = lifecycle.list_active(from_date)
    return ReservationListResponse(
        reservations=[to_reservation_response(item) for item in reservations]
    )


@router.get("/v1/reservations/{reservation_id}", response_model=ReservationResponse)
def get_reservation(
    reservation_id: str,
    lifecycle: ReservationLifecycle = Depends(get_reservation_lifecycle),
) -> ReservationResponse:
    return to_reservation_response(lifecycle.get(ReservationId(reservation_id)))


@router.post("/v1/reservations/{reservation_id}/confirm", response_model=ReservationResponse)
def confirm_reservation(
    reservation_id: str,
    lifecycle: ReservationLifecycle = Depends(get_reservation_lifecycle),
) -> ReservationResponse:
    updated = lifecycle.confirm(ReservationId(reservation_id), trace_ctx=trace_context())
    return to_reservation_response(updated)


@router.post("/v1/reservations/{reservation_id}/complete", response_model=ReservationResponse)
def complete_reservation(
    reservation_id: str,
    request_dto: ReservationTransitionRequest | None = Body(default=None),
    lifecycle: ReservationLifecycle = Depends(get_reservation_lifecycle),
) -> ReservationResponse:
    updated = lifecycle.complete(
        ReservationId(reservation_id),
        modified_by=request_dto.modified_by if request_dto else None,
        trace_ctx=trace_context(),
    )
    return to_reservation_response(updated)


@router.post("/v1/reservations/{reservation_id}/cancel", response_model=ReservationResponse)
def cancel_reservation(
    reservation_id: str,
    request_dto: ReservationTransitionRequest | None = Body(default=None),
    lifecycle: ReservationLifecycle = Depends(get_reservation_lifecycle),
) -> ReservationResponse:
    updated = lifecycle.cancel(
        ReservationId(reservation_id),
        modified_by=request_dto.modified_by if request_dto else None,
        trace_ctx=trace_context(),
    )
    return to_reservation_response(updated)


@router.get("/v1/customers/{customer_id}/reservations", response_model=ReservationListResponse)
def list_customer_reservations(
    customer_id: str,
    lifecycle: ReservationLifecycle = Depends(get_reservation_lifecycle),
) -> ReservationListResponse:
    reservations = lifecycle.list_for_customer(CustomerId(customer_id))
    return ReservationListResponse(
        reservations=[to_reservation_response(item) for item in reservations]
    )
