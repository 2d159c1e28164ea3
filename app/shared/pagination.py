"""Pagination utilities."""

from typing import Any, Dict, Sequence
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement, Select

from app.exceptions.base import ValidationError


def _after_cursor(
    sort_key: ColumnElement, id_column: ColumnElement, value: Any, cursor: UUID, descending: bool
) -> ColumnElement:
    """Condition selecting the cursor row and every row ordered after it.

    Rows are ordered by ``sort_key`` (nulls last) and then by ``id_column`` in
    the same direction, so ``(sort_key, id)`` is a total order.
    """
    if value is None:
        tie = id_column <= cursor if descending else id_column >= cursor
        return and_(sort_key.is_(None), tie)

    beyond = sort_key < value if descending else sort_key > value
    tie = id_column <= cursor if descending else id_column >= cursor
    return or_(beyond, and_(sort_key == value, tie), sort_key.is_(None))


def order_for_cursor(
    query: Select, sort_key: ColumnElement, id_column: ColumnElement, descending: bool
) -> Select:
    """Apply the ordering that cursor pagination relies on."""
    if descending:
        return query.order_by(sort_key.desc().nulls_last(), id_column.desc())
    return query.order_by(sort_key.asc().nulls_last(), id_column.asc())


async def paginate_by_cursor(
    db: AsyncSession,
    query: Select,
    *,
    sort_key: ColumnElement,
    id_column: ColumnElement,
    limit: int,
    cursor: UUID | None = None,
    descending: bool = True,
    load_options: Sequence[Any] = (),
) -> Dict[str, Any]:
    """
    Paginate a SQLAlchemy query forward from an opaque cursor.

    The page starts at the cursor row itself. ``limit + 1`` rows are fetched;
    when the extra row is present it is dropped and its id becomes the
    ``next_cursor`` for the following page.

    Args:
        db: Database session
        query: SQLAlchemy select query with all filters applied, not yet ordered
        sort_key: Expression the rows are ordered by
        id_column: Primary key column, used as tie breaker and cursor value
        limit: Page size
        cursor: Id of the first row of the requested page
        descending: Sort direction
        load_options: Loader options for the page query only; rows are refreshed when given

    Returns:
        Dictionary with the page items and the next cursor (or None)

    Raises:
        ValidationError: If the cursor does not identify a row of the query
    """
    if limit < 1:
        raise ValidationError("limit must be at least 1", details={"limit": limit})

    if cursor is not None:
        cursor_query = query.with_only_columns(sort_key).where(id_column == cursor).order_by(None)
        cursor_row = (await db.execute(cursor_query)).one_or_none()
        if cursor_row is None:
            raise ValidationError("Invalid pagination cursor", details={"cursor": str(cursor)})
        query = query.where(_after_cursor(sort_key, id_column, cursor_row[0], cursor, descending))

    page_query = order_for_cursor(query, sort_key, id_column, descending).limit(limit + 1)
    if load_options:
        page_query = page_query.options(*load_options).execution_options(populate_existing=True)
    result = await db.execute(page_query)
    items = list(result.scalars().unique().all())

    next_cursor = None
    if len(items) > limit:
        next_item = items.pop()
        next_cursor = next_item.id

    return {"items": items, "next_cursor": next_cursor}
