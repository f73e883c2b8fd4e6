from __future__ import annotations

from datetime import date

from rrs.application.dto.responses import (
    DailyReportResponse,
    TableUtilizationItemResponse,
    TableUtilizationResponse,
    WaitlistReportResponse,
)
from rrs.application.mappers.reservation_mapper import to_reservation_response
from rrs.application.mappers.waitlist_mapper import to_waitlist_response
from rrs.application.ports.repositories import TableUtilizationData
from rrs.application.use_cases.reports import DailyReservationReport, WaitlistReport


def to_daily_report_response(report: DailyReservationReport) -> DailyReportResponse:
    return DailyReportResponse(
        reportDate=report.report_date,
        total=report.total,
        byStatus={status.value: count for status, count in report.by_status.items()},
        reservations=[to_reservation_response(item) for item in report.reservations],
    )


def to_utilization_response(
    report_date: date,
    rows: list[TableUtilizationData],
) -> TableUtilizationResponse:
    return TableUtilizationResponse(
        reportDate=report_date,
        tables=[
            TableUtilizationItemResponse(
                tableId=str(row.table_id),
                tableNumber=row.table_number,
                capacity=row.capacity,
                reservationCount=row.reservation_count,
            )
            for row in rows
        ],
    )


def to_waitlist_report_response(report: WaitlistReport) -> WaitlistReportResponse:
    return WaitlistReportResponse(
        reportDate=report.report_date,
        totalWaiting=report.total_waiting,
        averageWaitMinutes=report.average_wait_minutes,
        entries=[to_waitlist_response(entry) for entry in report.entries],
    )
