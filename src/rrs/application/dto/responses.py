from __future__ import annotations

from datetime import date, datetime, time

from pydantic import BaseModel, Field


class TableCategoryResponse(BaseModel):
    categoryId: str
    name: str
    minCapacity: int
    maxCapacity: int
    description: str | None = None


class TableResponse(BaseModel):
    tableId: str
    tableNumber: str
    capacity: int
    status: str
    category: TableCategoryResponse
    location: str | None = None
    hasWindow: bool
    isPrivate: bool
    lastModifiedBy: str | None = None
    lastModifiedAt: datetime | None = None


class TableListResponse(BaseModel):
    tables: list[TableResponse] = Field(default_factory=list)


class TableCategoryListResponse(BaseModel):
    categories: list[TableCategoryResponse] = Field(default_factory=list)


class AvailabilityResponse(BaseModel):
    tableId: str
    requestedDate: date
    requestedTime: time
    durationMinutes: int
    available: bool
    conflictingReservationIds: list[str] = Field(default_factory=list)


class ReservationResponse(BaseModel):
    reservationId: str
    customerId: str
    tableId: str
    reservationDate: date
    reservationTime: time
    partySize: int
    status: str
    durationMinutes: int
    notes: str | None = None
    createdAt: datetime | None = None


class ReservationListResponse(BaseModel):
    reservations: list[ReservationResponse] = Field(default_factory=list)


class WaitlistEntryResponse(BaseModel):
    waitlistId: str
    customerId: str
    requestedDate: date
    requestedTime: time
    partySize: int
    status: str
    queuePosition: int
    waitTimeMinutes: int
    createdAt: datetime | None = None


class WaitlistListResponse(BaseModel):
    entries: list[WaitlistEntryResponse] = Field(default_factory=list)


class DailyReportResponse(BaseModel):
    reportDate: date
    total: int
    byStatus: dict[str, int] = Field(default_factory=dict)
    reservations: list[ReservationResponse] = Field(default_factory=list)


class TableUtilizationItemResponse(BaseModel):
    tableId: str
    tableNumber: str
    capacity: int
    reservationCount: int


class TableUtilizationResponse(BaseModel):
    reportDate: date
    tables: list[TableUtilizationItemResponse] = Field(default_factory=list)


class WaitlistReportResponse(BaseModel):
    reportDate: date
    totalWaiting: int
    averageWaitMinutes: float
    entries: list[WaitlistEntryResponse] = Field(default_factory=list)
