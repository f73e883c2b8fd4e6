from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from rrs.api.dependencies import get_reports
from rrs.application.dto.responses import (
    DailyReportResponse,
    TableUtilizationResponse,
    WaitlistReportResponse,
)
from rrs.application.mappers.report_mapper import (
    to_daily_report_response,
    to_utilization_response,
    to_waitlist_report_response,
)
from rrs.application.use_cases.reports import ReservationReports

router = APIRouter()


@router.get("/v1/reports/daily", response_model=DailyReportResponse)
def daily_report(
    report_date: date = Query(alias="date"),
    reports: ReservationReports = Depends(get_reports),
) -> DailyReportResponse:
    return to_daily_report_response(reports.daily_reservations(report_date))


@router.get("/v1/reports/table-utilization", response_model=TableUtilizationResponse)
def table_utilization_report(
    report_date: date = Query(alias="date"),
    reports: ReservationReports = Depends(get_reports),
) -> TableUtilizationResponse:
    return to_utilization_response(report_date, reports.table_utilization(report_date))


@router.get("/v1/reports/waitlist", response_model=WaitlistReportResponse)
def waitlist_report(
    report_date: date = Query(alias="date"),
    reports: ReservationReports = Depends(get_reports),
) -> WaitlistReportResponse:
    return to_waitlist_report_response(reports.waitlist(report_date))
