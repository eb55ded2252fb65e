"""Statement helpers shared by the list operations."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import Select, func, or_

from ..utils import as_utc


def match_text(stmt: Select, needle: str | None, *columns: Any) -> Select:
    """Case-insensitive substring match against any of ``columns``."""
    if not needle:
        return stmt
    lowered = needle.lower()
    return stmt.where(
        or_(*(func.lower(column).contains(lowered, autoescape=True) for column in columns))
    )


def apply_date_bounds(
    stmt: Select, column: Any, after: datetime | None, before: datetime | None
) -> Select:
    """Restrict ``stmt`` to ``after <= column <= before``."""
    if after is not None:
        stmt = stmt.where(column >= as_utc(after))
    if before is not None:
        stmt = stmt.where(column <= as_utc(before))
    return stmt


def apply_order(
    stmt: Select, record: type, order_by: Mapping[str, str] | None, default: list[Any]
) -> Select:
    """Order by the caller's fields first, then the default keys."""
    clauses = []
    for field, direction in (order_by or {}).items():
        attr = getattr(record, field)
        clauses.append(attr.desc() if direction == "desc" else attr.asc())
    return stmt.order_by(*clauses, *default)


def apply_paging(stmt: Select, take: int | None, skip: int | None) -> Select:
    if skip:
        stmt = stmt.offset(skip)
    if take is not None:
        stmt = stmt.limit(take)
    return stmt
