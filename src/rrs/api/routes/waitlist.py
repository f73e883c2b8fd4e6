from __future__ import annotations

from datetime import date, time

from fastapi import APIRouter, Depends, Query, status

from rrs.api.dependencies import get_waitlist_queue, trace_context
from rrs.application.dto.requests import JoinWaitlistRequest, WaitTimeRequest
from rrs.application.dto.responses import WaitlistEntryResponse, WaitlistListResponse
from rrs.application.mappers.waitlist_mapper import to_waitlist_response
from rrs.application.use_cases.waitlist_queue import WaitlistQueue
from rrs.domain.common.ids import CustomerId, WaitlistEntryId

router = APIRouter()


@router.post(
    "/v1/waitlist",
    response_model=WaitlistEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
def join_waitlist(
    request_dto: JoinWaitlistRequest,
    queue: WaitlistQueue = Depends(get_waitlist_queue),
) -> WaitlistEntryResponse:
    entry = queue.join(
        customer_id=CustomerId(request_dto.customer_id),
        requested_date=request_dto.requested_date,
        requested_time=request_dto.requested_time,
        party_size=request_dto.party_size,
        trace_ctx=trace_context(),
    )
    return to_waitlist_response(entry)


@router.get("/v1/waitlist", response_model=WaitlistListResponse)
def list_waitlist(
    requested_date: date | None = Query(default=None, alias="date"),
    requested_time: time | None = Query(default=None, alias="time"),
    queue: WaitlistQueue = Depends(get_waitlist_queue),
) -> WaitlistListResponse:
    entries = queue.list_active(requested_date, requested_time)
    return WaitlistListResponse(entries=[to_waitlist_response(entry) for entry in entries])


@router.get("/v1/waitlist/{waitlist_id}", response_model=WaitlistEntryResponse)
def get_waitlist_entry(
    waitlist_id: str,
    queue: WaitlistQueue = Depends(get_waitlist_queue),
) -> WaitlistEntryResponse:
    return to_waitlist_response(queue.get(WaitlistEntryId(waitlist_id)))


@router.delete("/v1/waitlist/{waitlist_id}", response_model=WaitlistEntryResponse)
def remove_waitlist_entry(
    waitlist_id: str,
    queue: WaitlistQueue = Depends(get_waitlist_queue),
) -> WaitlistEntryResponse:
    removed = queue.remove(WaitlistEntryId(waitlist_id), trace_ctx=trace_context())
    return to_waitlist_response(removed)


@router.post("/v1/waitlist/{waitlist_id}/seat", response_model=WaitlistEntryResponse)
def seat_waitlist_entry(
    waitlist_id: str,
    queue: WaitlistQueue = Depends(get_waitlist_queue),
) -> WaitlistEntryResponse:
    return to_waitlist_response(queue.seat(WaitlistEntryId(waitlist_id), trace_ctx=trace_context()))


@router.post("/v1/waitlist/{waitlist_id}/expire", response_model=WaitlistEntryResponse)
def expire_waitlist_entry(
    waitlist_id: str,
    queue: WaitlistQueue = Depends(get_waitlist_queue),
) -> WaitlistEntryResponse:
    return to_waitlist_response(
        queue.expire(WaitlistEntryId(waitlist_id), trace_ctx=trace_context())
    )


@router.put("/v1/waitlist/{waitlist_id}/wait-time", response_model=WaitlistEntryResponse)
def set_wait_time(
    waitlist_id: str,
    request_dto: WaitTimeRequest,
    queue: WaitlistQueue = Depends(get_waitlist_queue),
) -> WaitlistEntryResponse:
    entry = queue.set_wait_time(WaitlistEntryId(waitlist_id), request_dto.minutes)
    return to_waitlist_response(entry)


@router.get("/v1/customers/{customer_id}/waitlist", response_model=WaitlistListResponse)
def list_customer_waitlist(
    customer_id: str,
    queue: WaitlistQueue = Depends(get_waitlist_queue),
) -> WaitlistListResponse:
    entries = queue.list_for_customer(CustomerId(customer_id))
    return WaitlistListResponse(entries=[to_waitlist_response(entry) for entry in entries])
