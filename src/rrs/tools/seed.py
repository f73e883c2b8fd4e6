from __future__ import annotations

from datetime import datetime

from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from rrs.domain.table.entities import TableStatus
from rrs.infrastructure.db.models.table import TableCategoryModel, TableModel
from rrs.infrastructure.db.session import get_engine

CATEGORIES = [
    {
        "id": "cat_small",
        "name": "Small",
        "min_capacity": 1,
        "max_capacity": 2,
        "description": "Two-tops and bar seating",
    },
    {
        "id": "cat_standard",
        "name": "Standard",
        "min_capacity": 3,
        "max_capacity": 6,
        "description": "Regular dining tables",
    },
    {
        "id": "cat_large",
        "name": "Large",
        "min_capacity": 7,
        "max_capacity": 20,
        "description": "Group and banquet tables",
    },
]

TABLES = [
    ("tbl_001", "T1", "cat_small", 2, "Window row", True, False),
    ("tbl_002", "T2", "cat_small", 2, "Window row", True, False),
    ("tbl_003", "T3", "cat_standard", 4, "Main floor", False, False),
    ("tbl_004", "T4", "cat_standard", 4, "Main floor", False, False),
    ("tbl_005", "T5", "cat_standard", 6, "Main floor", False, False),
    ("tbl_006", "P1", "cat_large", 10, "Private room", False, True),
]


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {"table_categories", "tables", "reservations", "waitlist_entries"}
    if not required_tables.issubset(set(inspector.get_table_names(schema="public"))):
        print("no schema yet")
        return

    now = datetime.now()
    with Session(engine) as session:
        for category in CATEGORIES:
            session.execute(
                insert(TableCategoryModel)
                .values(**category)
                .on_conflict_do_update(
                    index_elements=[TableCategoryModel.id],
                    set_={
                        "name": category["name"],
                        "min_capacity": category["min_capacity"],
                        "max_capacity": category["max_capacity"],
                        "description": category["description"],
                    },
                )
            )

        for table_id, number, category_id, capacity, location, has_window, is_private in TABLES:
            session.execute(
                insert(TableModel)
                .values(
                    id=table_id,
                    table_number=number,
                    category_id=category_id,
                    capacity=capacity,
                    status=TableStatus.AVAILABLE.value,
                    location=location,
                    has_window=has_window,
                    is_private=is_private,
                    last_modified_by="seed",
                    last_modified_at=now,
                )
                .on_conflict_do_update(
                    index_elements=[TableModel.id],
                    set_={
                        "table_number": number,
                        "category_id": category_id,
                        "capacity": capacity,
                        "location": location,
                        "has_window": has_window,
                        "is_private": is_private,
                    },
                )
            )

        session.commit()
        print("seed complete")


if __name__ == "__main__":
    main()
