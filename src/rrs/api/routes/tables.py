from __future__ import annotations

from datetime import date, time

from fastapi import APIRouter, Depends, Query, status

from rrs.api.dependencies import get_table_administration
from rrs.application.dto.requests import RegisterTableRequest, TableStatusRequest
from rrs.application.dto.responses import (
    AvailabilityResponse,
    TableCategoryListResponse,
    TableListResponse,
    TableResponse,
)
from rrs.application.mappers.table_mapper import to_category_response, to_table_response
from rrs.application.use_cases.table_administration import TableAdministration
from rrs.domain.common.ids import CategoryId, ManagerId, TableId
from rrs.domain.reservation.entities import DEFAULT_DURATION_MINUTES

router = APIRouter()


@router.get("/v1/tables", response_model=TableListResponse)
def list_tables(
    administration: TableAdministration = Depends(get_table_administration),
) -> TableListResponse:
    return TableListResponse(
        tables=[to_table_response(table) for table in administration.list_tables()]
    )


@router.post("/v1/tables", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
def register_table(
    request_dto: RegisterTableRequest,
    administration: TableAdministration = Depends(get_table_administration),
) -> TableResponse:
    table = administration.register(
        table_number=request_dto.table_number,
        capacity=request_dto.capacity,
        category_id=CategoryId(request_dto.category_id),
        location=request_dto.location,
        has_window=request_dto.has_window,
        is_private=request_dto.is_private,
        manager_id=ManagerId(request_dto.manager_id) if request_dto.manager_id else None,
    )
    return to_table_response(table)


@router.get("/v1/table-categories", response_model=TableCategoryListResponse)
def list_categories(
    administration: TableAdministration = Depends(get_table_administration),
) -> TableCategoryListResponse:
    return TableCategoryListResponse(
        categories=[to_category_response(item) for item in administration.list_categories()]
    )


@router.get("/v1/table-candidates", response_model=TableListResponse)
def table_candidates(
    party_size: int = Query(alias="partySize"),
    on_date: date = Query(alias="date"),
    at_time: time = Query(alias="time"),
    duration_minutes: int = Query(default=DEFAULT_DURATION_MINUTES, alias="durationMinutes"),
    administration: TableAdministration = Depends(get_table_administration),
) -> TableListResponse:
    candidates = administration.find_candidates(party_size, on_date, at_time, duration_minutes)
    return TableListResponse(tables=[to_table_response(table) for table in candidates])


@router.get("/v1/tables/{table_id}", response_model=TableResponse)
def get_table(
    table_id: str,
    administration: TableAdministration = Depends(get_table_administration),
) -> TableResponse:
    return to_table_response(administration.get(TableId(table_id)))


@router.post("/v1/tables/{table_id}/status", response_model=TableResponse)
def set_table_status(
    table_id: str,
    request_dto: TableStatusRequest,
    administration: TableAdministration = Depends(get_table_administration),
) -> TableResponse:
    table = administration.set_status(
        TableId(table_id),
        request_dto.status,
        ManagerId(request_dto.manager_id),
    )
    return to_table_response(table)


@router.get("/v1/tables/{table_id}/availability", response_model=AvailabilityResponse)
def table_availability(
    table_id: str,
    on_date: date = Query(alias="date"),
    at_time: time = Query(alias="time"),
    duration_minutes: int = Query(default=DEFAULT_DURATION_MINUTES, alias="durationMinutes"),
    administration: TableAdministration = Depends(get_table_administration),
) -> AvailabilityResponse:
    conflicts = administration.check_availability(
        TableId(table_id), on_date, at_time, duration_minutes
    )
    return AvailabilityResponse(
        tableId=table_id,
        requestedDate=on_date,
        requestedTime=at_time,
        durationMinutes=duration_minutes,
        available=not conflicts,
        conflictingReservationIds=[str(item.reservation_id) for item in conflicts],
    )
