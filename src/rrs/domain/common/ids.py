from __future__ import annotations

from typing import NewType

CustomerId = NewType("CustomerId", str)
ManagerId = NewType("ManagerId", str)
CategoryId = NewType("CategoryId", str)
TableId = NewType("TableId", str)
ReservationId = NewType("ReservationId", str)
WaitlistEntryId = NewType("WaitlistEntryId", str)
