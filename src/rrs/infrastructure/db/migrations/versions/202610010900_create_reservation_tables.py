"""create table categories, tables and reservations

Revision ID: 202610010900
Revises:
Create Date: 2026-10-01 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "202610010900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "table_categories",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("min_capacity", sa.Integer(), nullable=False),
        sa.Column("max_capacity", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.CheckConstraint(
            "min_capacity >= 1 AND max_capacity <= 20 AND min_capacity <= max_capacity",
            name="ck_table_categories_capacity_band",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_table_categories_name"),
    )

    op.create_table(
        "tables",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("table_number", sa.String(length=10), nullable=False),
        sa.Column("category_id", sa.String(length=50), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("location", sa.String(length=50), nullable=True),
        sa.Column("has_window", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_modified_by", sa.String(length=50), nullable=True),
        sa.Column("last_modified_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("capacity BETWEEN 1 AND 20", name="ck_tables_capacity"),
        sa.ForeignKeyConstraint(["category_id"], ["table_categories.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("table_number", name="uq_tables_table_number"),
    )
    op.create_index("ix_tables_category_id", "tables", ["category_id"], unique=False)

    op.create_table(
        "reservations",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("customer_id", sa.String(length=50), nullable=False),
        sa.Column("table_id", sa.String(length=50), nullable=False),
        sa.Column("reservation_date", sa.Date(), nullable=False),
        sa.Column("reservation_time", sa.Time(), nullable=False),
        sa.Column("party_size", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="120"),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint("party_size BETWEEN 1 AND 20", name="ck_reservations_party_size"),
        sa.CheckConstraint("duration_minutes > 0", name="ck_reservations_duration"),
        sa.ForeignKeyConstraint(["table_id"], ["tables.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reservations_customer_id", "reservations", ["customer_id"], unique=False)
    op.create_index(
        "ix_reservations_table_date",
        "reservations",
        ["table_id", "reservation_date"],
        unique=False,
    )
    op.create_index(
        "ix_reservations_date_time",
        "reservations",
        ["reservation_date", "reservation_time"],
        unique=False,
    )

    op.create_table(
        "waitlist_entries",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("customer_id", sa.String(length=50), nullable=False),
        sa.Column("requested_date", sa.Date(), nullable=False),
        sa.Column("requested_time", sa.Time(), nullable=False),
        sa.Column("party_size", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("queue_position", sa.Integer(), nullable=False),
        sa.Column("wait_time_minutes", sa.Integer(), nullable=False, server_default="120"),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint("party_size > 0", name="ck_waitlist_entries_party_size"),
        sa.CheckConstraint("queue_position > 0", name="ck_waitlist_entries_queue_position"),
        sa.CheckConstraint("wait_time_minutes >= 0", name="ck_waitlist_entries_wait_time"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_waitlist_entries_customer_id", "waitlist_entries", ["customer_id"], unique=False
    )
    op.create_index(
        "ix_waitlist_entries_slot_status_position",
        "waitlist_entries",
        ["requested_date", "requested_time", "status", "queue_position"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_waitlist_entries_slot_status_position", table_name="waitlist_entries")
    op.drop_index("ix_waitlist_entries_customer_id", table_name="waitlist_entries")
    op.drop_table("waitlist_entries")
    op.drop_index("ix_reservations_date_time", table_name="reservations")
    op.drop_index("ix_reservations_table_date", table_name="reservations")
    op.drop_index("ix_reservations_customer_id", table_name="reservations")
    op.drop_table("reservations")
    op.drop_index("ix_tables_category_id", table_name="tables")
    op.drop_table("tables")
    op.drop_table("table_categories")
