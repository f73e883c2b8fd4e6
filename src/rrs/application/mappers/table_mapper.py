from __future__ import annotations

from rrs.application.dto.responses import TableCategoryResponse, TableResponse
from rrs.domain.table.entities import Table, TableCategory


def to_category_response(category: TableCategory) -> TableCategoryResponse:
    return TableCategoryResponse(
        categoryId=str(category.category_id),
        name=category.name,
        minCapacity=category.min_capacity,
        maxCapacity=category.max_capacity,
        description=category.description,
    )


def to_table_response(table: Table) -> TableResponse:
    return TableResponse(
        tableId=str(table.table_id),
        tableNumber=table.table_number,
        capacity=table.capacity,
        status=table.status.value,
        category=to_category_response(table.category),
        location=table.location,
        hasWindow=table.has_window,
        isPrivate=table.is_private,
        lastModifiedBy=table.last_modified_by,
        lastModifiedAt=table.last_modified_at,
    )
