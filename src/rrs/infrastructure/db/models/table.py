from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rrs.infrastructure.db.models.base import Base


class TableCategoryModel(Base):
    __tablename__ = "table_categories"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    min_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    max_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    tables: Mapped[list["TableModel"]] = relationship(back_populates="category")


class TableModel(Base):
    __tablename__ = "tables"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    table_number: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)
    category_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("table_categories.id"),
        nullable=False,
        index=True,
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[str | None] = mapped_column(String(50), nullable=True)
    has_window: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_modified_by: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_modified_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    category: Mapped[TableCategoryModel] = relationship(
        back_populates="tables",
        lazy="joined",
        innerjoin=True,
    )
