from __future__ import annotations

from datetime import date, datetime, time

from sqlalchemy import Date, DateTime, Index, Integer, String, Time, func
from sqlalchemy.orm import Mapped, mapped_column

from rrs.infrastructure.db.models.base import Base


class WaitlistEntryModel(Base):
    __tablename__ = "waitlist_entries"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    customer_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    requested_date: Mapped[date] = mapped_column(Date, nullable=False)
    requested_time: Mapped[time] = mapped_column(Time, nullable=False)
    party_size: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    queue_position: Mapped[int] = mapped_column(Integer, nullable=False)
    wait_time_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=120)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index(
            "ix_waitlist_entries_slot_status_position",
            "requested_date",
            "requested_time",
            "status",
            "queue_position",
        ),
    )
