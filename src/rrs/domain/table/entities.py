from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from rrs.domain.common.errors import ValidationError
from rrs.domain.common.ids import CategoryId, TableId
from rrs.domain.common.status import parse_status

MIN_TABLE_CAPACITY = 1
MAX_TABLE_CAPACITY = 20


class TableStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    RESERVED = "RESERVED"
    MAINTENANCE = "MAINTENANCE"

    @classmethod
    def parse(cls, raw: str | None) -> TableStatus:
        return parse_status(cls, raw)


@dataclass(frozen=True)
class TableCategory:
    category_id: CategoryId
    name: str
    min_capacity: int
    max_capacity: int
    description: str | None = None

    def __post_init__(self) -> None:
        if self.min_capacity < MIN_TABLE_CAPACITY or self.max_capacity > MAX_TABLE_CAPACITY:
            raise ValidationError(
                f"category capacity band must lie within "
                f"{MIN_TABLE_CAPACITY}..{MAX_TABLE_CAPACITY}"
            )
        if self.min_capacity > self.max_capacity:
            raise ValidationError("category min_capacity must not exceed max_capacity")

    def admits(self, capacity: int) -> bool:
        return self.min_capacity <= capacity <= self.max_capacity


@dataclass(frozen=True)
class Table:
    table_id: TableId
    table_number: str
    capacity: int
    status: TableStatus
    category: TableCategory
    location: str | None = None
    has_window: bool = False
    is_private: bool = False
    last_modified_by: str | None = None
    last_modified_at: datetime | None = None

    def __post_init__(self) -> None:
        if not MIN_TABLE_CAPACITY <= self.capacity <= MAX_TABLE_CAPACITY:
            raise ValidationError(
                f"capacity must be between {MIN_TABLE_CAPACITY} and {MAX_TABLE_CAPACITY}"
            )

    @property
    def is_available(self) -> bool:
        return self.status == TableStatus.AVAILABLE

    def can_accommodate(self, party_size: int) -> bool:
        return 1 <= party_size <= self.capacity

    def with_status(self, status: TableStatus, modified_by: str | None, now: datetime) -> Table:
        return replace(self, status=status, last_modified_by=modified_by, last_modified_at=now)
