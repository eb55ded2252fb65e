"""Service for reading and editing columns.

Columns are created with their board and never added, removed or
reordered afterwards; only name, WIP limit and done flag can change.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import BoardNotFoundError, ValidationError
from ..models import Column, ColumnStatus, ColumnUpdate
from ..repositories.schema import BoardRecord, ColumnRecord
from . import capacity, positions
from .task_service import lock_column
from .validation import parse_input

if TYPE_CHECKING:
    from ..repositories import Database

logger = logging.getLogger(__name__)


class ColumnService:
    """Service for column inspection and edits."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def get_column(self, column_id: str) -> Column | None:
        """Get a column by ID, or None if it does not exist."""

        def load(session: Session) -> Column | None:
            record = session.get(ColumnRecord, column_id)
            return Column.from_record(record) if record is not None else None

        return self.database.run(load, "get_column", read_only=True)

    def list_columns(self, board_id: str) -> list[Column]:
        """
        List a board's columns ordered by position.

        Raises:
            BoardNotFoundError: board does not exist
        """

        def load(session: Session) -> list[Column]:
            if session.get(BoardRecord, board_id) is None:
                raise BoardNotFoundError(board_id)
            records = session.scalars(
                select(ColumnRecord)
                .where(ColumnRecord.board_id == board_id)
                .order_by(ColumnRecord.position)
            )
            return [Column.from_record(record) for record in records]

        return self.database.run(load, "list_columns", read_only=True)

    def update_column(self, column_id: str, **changes: Any) -> Column:
        """
        Rename a column or change its WIP limit or done flag.

        Raises:
            ValidationError: invalid value, or a WIP limit below the number of
                tasks already in the column
            ColumnNotFoundError: column does not exist
        """
        data = parse_input(ColumnUpdate, **changes)
        fields = data.changes()

        def update(session: Session) -> Column:
            column = lock_column(session, column_id)
            wip_limit = fields.get("wip_limit")
            if wip_limit:
                count = positions.count_tasks(session, column.id)
                if count > wip_limit:
                    raise ValidationError(
                        f"Cannot set WIP limit of column '{column.name}' to {wip_limit}: "
                        f"it holds {count} tasks",
                        column_id=column_id,
                        task_count=count,
                        wip_limit=wip_limit,
                    )
            for name, value in fields.items():
                setattr(column, name, value)
            session.flush()
            return Column.from_record(column)

        column = self.database.run(update, "update_column")
        logger.info("Column updated: %s (%s)", column_id, ", ".join(sorted(fields)) or "touch")
        return column

    def get_column_status(self, column_id: str) -> ColumnStatus | None:
        """Occupancy and capacity flags for a column, or None if it does not exist."""
        ratio = self.database.settings.near_capacity_ratio

        def load(session: Session) -> ColumnStatus | None:
            column = session.get(ColumnRecord, column_id)
            if column is None:
                return None
            count = positions.count_tasks(session, column.id)
            return ColumnStatus(
                column_id=column.id,
                task_count=count,
                wip_limit=column.wip_limit,
                is_at_capacity=capacity.is_at_capacity(column.wip_limit, count),
                is_near_capacity=capacity.is_near_capacity(column.wip_limit, count, ratio),
                available_capacity=capacity.available_capacity(column.wip_limit, count),
            )

        return self.database.run(load, "get_column_status", read_only=True)

    def repair_positions(self, column_id: str) -> int:
        """
        Renumber a column's tasks to 0..n-1, keeping their relative order.

        Returns:
            Number of tasks whose position changed

        Raises:
            ColumnNotFoundError: column does not exist
        """

        def repair(session: Session) -> int:
            column = lock_column(session, column_id)
            return positions.repair(session, column.id)

        return self.database.run(repair, "repair_positions")
