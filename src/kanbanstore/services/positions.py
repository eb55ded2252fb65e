"""Task ordering within a column.

Positions are zero-based. With compaction enabled every column holds exactly
0..n-1: removals shift later tasks down, explicit inserts shift them up.
All functions run inside the caller's transaction.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ..repositories.schema import TaskRecord

logger = logging.getLogger(__name__)


def count_tasks(session: Session, column_id: str) -> int:
    return session.scalar(
        select(func.count()).select_from(TaskRecord).where(TaskRecord.column_id == column_id)
    ) or 0


def next_position(session: Session, column_id: str) -> int:
    """Append position for a new task: the current task count."""
    return count_tasks(session, column_id)


def clamp_position(requested: int, upper: int) -> int:
    """Clamp ``requested`` into ``[0, upper]``."""
    return max(0, min(requested, upper))


def _shift(
    session: Session,
    column_id: str,
    delta: int,
    *,
    start: int,
    end: int | None = None,
    exclude_id: str | None = None,
) -> None:
    """Add ``delta`` to positions in ``[start, end]`` of one column."""
    stmt = (
        update(TaskRecord)
        .where(TaskRecord.column_id == column_id, TaskRecord.position >= start)
        .values(position=TaskRecord.position + delta)
        .execution_options(synchronize_session=False)
    )
    if end is not None:
        stmt = stmt.where(TaskRecord.position <= end)
    if exclude_id is not None:
        stmt = stmt.where(TaskRecord.id != exclude_id)
    session.execute(stmt)


def close_gap(session: Session, column_id: str, position: int, *, exclude_id: str) -> None:
    """Shift tasks after a vacated ``position`` down by one."""
    _shift(session, column_id, -1, start=position + 1, exclude_id=exclude_id)


def open_slot(session: Session, column_id: str, position: int, *, exclude_id: str) -> None:
    """Shift tasks at or after ``position`` up by one."""
    _shift(session, column_id, 1, start=position, exclude_id=exclude_id)


def reorder_within(
    session: Session, column_id: str, old: int, new: int, *, exclude_id: str
) -> None:
    """Make room for a task moving from ``old`` to ``new`` in the same column."""
    if new < old:
        _shift(session, column_id, 1, start=new, end=old - 1, exclude_id=exclude_id)
    elif new > old:
        _shift(session, column_id, -1, start=old + 1, end=new, exclude_id=exclude_id)


def repair(session: Session, column_id: str) -> int:
    """Renumber a column densely by (position, created_at, id).

    Returns:
        Number of tasks whose position changed
    """
    records = session.scalars(
        select(TaskRecord)
        .where(TaskRecord.column_id == column_id)
        .order_by(TaskRecord.position, TaskRecord.created_at, TaskRecord.id)
    ).all()
    changed = 0
    for index, record in enumerate(records):
        if record.position != index:
            record.position = index
            changed += 1
    if changed:
        logger.info("Repaired %d positions in column %s", changed, column_id)
    return changed
