"""Service for task workflow: create, update, move, delete and list."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from ..errors import ColumnCapacityFullError, ColumnNotFoundError, TaskNotFoundError
from ..models import Task, TaskCreate, TaskFilters, TaskMove, TaskUpdate
from ..repositories.schema import ColumnRecord, TaskRecord, new_id
from ..utils import now_utc
from . import capacity, positions
from .query import apply_date_bounds, apply_order, apply_paging, match_text
from .validation import parse_input

if TYPE_CHECKING:
    from ..repositories import Database

logger = logging.getLogger(__name__)


def lock_column(session: Session, column_id: str) -> ColumnRecord:
    """Load a column for update; its row lock serializes admissions."""
    column = session.scalar(
        select(ColumnRecord).where(ColumnRecord.id == column_id).with_for_update()
    )
    if column is None:
        raise ColumnNotFoundError(column_id)
    return column


def lock_task(session: Session, task_id: str) -> TaskRecord:
    task = session.scalar(select(TaskRecord).where(TaskRecord.id == task_id).with_for_update())
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


class TaskService:
    """Service for task workflow operations."""

    def __init__(self, database: Database) -> None:
        self.database = database

    @property
    def compact_positions(self) -> bool:
        return self.database.settings.compact_positions

    def create_task(
        self,
        column_id: str,
        title: str,
        content: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> Task:
        """
        Create a task at the end of a column.

        The capacity check and the insert share one transaction, so two
        writers can never both take a column's last slot.

        Raises:
            ValidationError: invalid title, content or metadata
            ColumnNotFoundError: column does not exist
            ColumnCapacityFullError: column is at its WIP limit
        """
        data = parse_input(TaskCreate, title=title, content=content, metadata=metadata)

        def create(session: Session) -> Task:
            column = lock_column(session, column_id)
            occupancy = positions.count_tasks(session, column.id)
            capacity.ensure_capacity(column, occupancy)

            now = now_utc()
            record = TaskRecord(
                id=new_id(),
                column_id=column.id,
                title=data.title,
                content=data.content,
                position=positions.next_position(session, column.id),
                task_metadata=data.metadata,
                update_reason=None,
                created_at=now,
                updated_at=now,
            )
            session.add(record)
            session.flush()
            return Task.from_record(record)

        try:
            task = self.database.run(create, "create_task")
        except ColumnCapacityFullError as e:
            logger.info("Task rejected: %s", e.message)
            raise
        logger.info("Task created: %s (column=%s, position=%d)", task.id, column_id, task.position)
        return task

    def get_task(self, task_id: str) -> Task | None:
        """Get a task by ID, or None if it does not exist."""

        def load(session: Session) -> Task | None:
            record = session.get(TaskRecord, task_id)
            return Task.from_record(record) if record is not None else None

        task = self.database.run(load, "get_task", read_only=True)
        if task is None:
            logger.debug("Task not found: %s", task_id)
        return task

    def update_task(self, task_id: str, **changes: Any) -> Task:
        """
        Update title, content, update_reason or metadata in place.

        Position and column never change here. Passing ``update_reason=None``
        clears the reason.

        Raises:
            ValidationError: unknown field or invalid value
            TaskNotFoundError: task does not exist
        """
        data = parse_input(TaskUpdate, **changes)
        fields = data.changes()

        def update(session: Session) -> Task:
            record = lock_task(session, task_id)
            for name, value in fields.items():
                setattr(record, "task_metadata" if name == "metadata" else name, value)
            record.updated_at = now_utc()
            session.flush()
            return Task.from_record(record)

        task = self.database.run(update, "update_task")
        logger.info("Task updated: %s (%s)", task_id, ", ".join(sorted(fields)) or "touch")
        return task

    def move_task(
        self,
        task_id: str,
        target_column_id: str,
        position: int | None = None,
        update_reason: str | None = None,
    ) -> None:
        """
        Move a task to a column, optionally at an explicit position.

        Only a move into a different column is capacity-gated; reordering
        within a column is always allowed. ``update_reason`` replaces the
        task's reason (None clears it).

        Raises:
            ValidationError: invalid position or reason
            TaskNotFoundError: task does not exist
            ColumnNotFoundError: target column does not exist
            ColumnCapacityFullError: target column is at its WIP limit
        """
        data = parse_input(
            TaskMove,
            target_column_id=target_column_id,
            position=position,
            update_reason=update_reason,
        )
        compact = self.compact_positions

        def move(session: Session) -> tuple[str, int]:
            task = lock_task(session, task_id)
            target = lock_column(session, data.target_column_id)
            source_column_id = task.column_id
            old_position = task.position

            if target.id != source_column_id:
                occupancy = positions.count_tasks(session, target.id)
                capacity.ensure_capacity(target, occupancy)
                requested = data.position if data.position is not None else occupancy
                if compact:
                    new_position = positions.clamp_position(requested, occupancy)
                    positions.close_gap(
                        session, source_column_id, old_position, exclude_id=task.id
                    )
                    positions.open_slot(session, target.id, new_position, exclude_id=task.id)
                else:
                    new_position = requested
            else:
                count = positions.count_tasks(session, target.id)
                if compact:
                    requested = data.position if data.position is not None else count - 1
                    new_position = positions.clamp_position(requested, count - 1)
                    positions.reorder_within(
                        session, target.id, old_position, new_position, exclude_id=task.id
                    )
                else:
                    new_position = data.position if data.position is not None else count

            task.column_id = target.id
            task.position = new_position
            task.update_reason = data.update_reason
            task.updated_at = now_utc()
            return source_column_id, new_position

        try:
            source_column_id, new_position = self.database.run(move, "move_task")
        except ColumnCapacityFullError as e:
            logger.info("Move of task %s rejected: %s", task_id, e.message)
            raise
        logger.info(
            "Task moved: %s (%s -> %s, position=%d)",
            task_id,
            source_column_id,
            data.target_column_id,
            new_position,
        )

    def delete_task(self, task_id: str) -> int:
        """
        Delete a task; later tasks in its column move up when compacting.

        Returns:
            1 if the task was deleted, 0 if it did not exist
        """
        compact = self.compact_positions

        def remove(session: Session) -> int:
            record = session.scalar(
                select(TaskRecord).where(TaskRecord.id == task_id).with_for_update()
            )
            if record is None:
                return 0
            column_id, position = record.column_id, record.position
            session.delete(record)
            session.flush()
            if compact:
                positions.close_gap(session, column_id, position, exclude_id=task_id)
            return 1

        deleted = self.database.run(remove, "delete_task")
        if deleted:
            logger.info("Task deleted: %s", task_id)
        else:
            logger.debug("Task already absent: %s", task_id)
        return deleted

    def list_tasks(self, **filters: Any) -> list[Task]:
        """
        List tasks ordered by position, then creation time.

        Accepts the fields of TaskFilters: board_id, column_id, search,
        has_update_reason, created_after, created_before, take, skip,
        order_by.
        """
        options = parse_input(TaskFilters, **filters)

        def load(session: Session) -> list[Task]:
            stmt = select(TaskRecord)
            if options.board_id is not None:
                stmt = stmt.join(ColumnRecord, TaskRecord.column_id == ColumnRecord.id).where(
                    ColumnRecord.board_id == options.board_id
                )
            if options.column_id is not None:
                stmt = stmt.where(TaskRecord.column_id == options.column_id)
            stmt = match_text(stmt, options.search, TaskRecord.title, TaskRecord.content)
            if options.has_update_reason is True:
                stmt = stmt.where(
                    and_(TaskRecord.update_reason.is_not(None), TaskRecord.update_reason != "")
                )
            elif options.has_update_reason is False:
                stmt = stmt.where(
                    or_(TaskRecord.update_reason.is_(None), TaskRecord.update_reason == "")
                )
            stmt = apply_date_bounds(
                stmt, TaskRecord.created_at, options.created_after, options.created_before
            )
            default = [TaskRecord.position, TaskRecord.created_at, TaskRecord.id]
            stmt = apply_order(stmt, TaskRecord, options.order_by, default)
            stmt = apply_paging(stmt, options.take, options.skip)
            return [Task.from_record(record) for record in session.scalars(stmt)]

        return self.database.run(load, "list_tasks", read_only=True)
