from __future__ import annotations

from datetime import date, time

from pydantic import BaseModel, ConfigDict, Field

from rrs.domain.reservation.entities import DEFAULT_DURATION_MINUTES
from rrs.domain.table.entities import TableStatus


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class RegisterTableRequest(CamelBaseModel):
    table_number: str = Field(min_length=1, max_length=10)
    capacity: int
    category_id: str = Field(min_length=1, max_length=50)
    location: str | None = Field(default=None, max_length=50)
    has_window: bool = False
    is_private: bool = False
    manager_id: str | None = Field(default=None, max_length=50)


class TableStatusRequest(CamelBaseModel):
    status: TableStatus
    manager_id: str = Field(min_length=1, max_length=50)


class CreateReservationRequest(CamelBaseModel):
    customer_id: str = Field(min_length=1, max_length=50)
    table_id: str | None = Field(default=None, max_length=50)
    reservation_date: date
    reservation_time: time
    party_size: int
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    notes: str | None = Field(default=None, max_length=500)
    confirmed: bool = False


class ReservationTransitionRequest(CamelBaseModel):
    modified_by: str | None = Field(default=None, max_length=50)


class JoinWaitlistRequest(CamelBaseModel):
    customer_id: str = Field(min_length=1, max_length=50)
    requested_date: date
    requested_time: time
    party_size: int


class WaitTimeRequest(CamelBaseModel):
    minutes: int
