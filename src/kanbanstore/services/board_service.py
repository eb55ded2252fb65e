"""Service for board lifecycle: creation, lookup, update and deletion."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..errors import BoardNotFoundError, ValidationError
from ..models import (
    Board,
    BoardCreate,
    BoardFilters,
    BoardUpdate,
    BoardWithColumns,
    ColumnDefinition,
    ColumnWithTasks,
    CreatedBoard,
    TaskSummary,
)
from ..repositories.schema import BoardRecord, ColumnRecord, TaskRecord, new_id
from ..utils import now_utc
from . import capacity
from .query import apply_date_bounds, apply_order, apply_paging, match_text
from .validation import parse_input

if TYPE_CHECKING:
    from ..repositories import Database

logger = logging.getLogger(__name__)


class BoardService:
    """Service for board lifecycle operations."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def create_board(
        self,
        name: str,
        goal: str = "",
        columns: Iterable[ColumnDefinition | Mapping[str, Any]] = (),
        landing_column_index: int = 0,
    ) -> CreatedBoard:
        """
        Create a board with its columns in one transaction.

        Each column keeps the position given in its definition. The landing
        column is the definition at ``landing_column_index`` in list order.

        Raises:
            ValidationError: invalid name, goal, column definitions or index
        """
        data = parse_input(
            BoardCreate,
            name=name,
            goal=goal,
            columns=list(columns),
            landing_column_index=landing_column_index,
        )

        def create(session: Session) -> CreatedBoard:
            now = now_utc()
            board = BoardRecord(
                id=new_id(),
                name=data.name,
                goal=data.goal,
                landing_column_id=None,
                created_at=now,
                updated_at=now,
            )
            session.add(board)
            session.flush()

            records = [
                ColumnRecord(
                    id=new_id(),
                    board_id=board.id,
                    name=definition.name,
                    position=definition.position,
                    wip_limit=definition.wip_limit,
                    is_done_column=definition.is_done_column,
                )
                for definition in data.columns
            ]
            session.add_all(records)
            session.flush()

            landing = records[data.landing_column_index]
            board.landing_column_id = landing.id
            return CreatedBoard(board_id=board.id, landing_column_id=landing.id)

        created = self.database.run(create, "create_board")
        logger.info(
            "Board created: %s (%s, %d columns)", created.board_id, data.name, len(data.columns)
        )
        return created

    def get_board(self, board_id: str) -> Board | None:
        """Get a board by ID, or None if it does not exist."""

        def load(session: Session) -> Board | None:
            record = session.get(BoardRecord, board_id)
            return Board.from_record(record) if record is not None else None

        board = self.database.run(load, "get_board", read_only=True)
        if board is None:
            logger.debug("Board not found: %s", board_id)
        return board

    def get_board_with_columns_and_tasks(self, board_id: str) -> BoardWithColumns | None:
        """
        Load a board tree: columns by position, each with tasks by position.

        Capacity flags are derived from each column's task count.
        """
        ratio = self.database.settings.near_capacity_ratio

        def load(session: Session) -> BoardWithColumns | None:
            board = session.get(BoardRecord, board_id)
            if board is None:
                return None

            column_records = session.scalars(
                select(ColumnRecord)
                .where(ColumnRecord.board_id == board_id)
                .order_by(ColumnRecord.position)
            ).all()
            task_records = session.scalars(
                select(TaskRecord)
                .join(ColumnRecord, TaskRecord.column_id == ColumnRecord.id)
                .where(ColumnRecord.board_id == board_id)
                .order_by(TaskRecord.position, TaskRecord.created_at, TaskRecord.id)
            ).all()

            tasks_by_column: dict[str, list[TaskSummary]] = defaultdict(list)
            for record in task_records:
                tasks_by_column[record.column_id].append(TaskSummary.from_record(record))

            columns = []
            for record in column_records:
                tasks = tasks_by_column[record.id]
                count = len(tasks)
                columns.append(
                    ColumnWithTasks(
                        id=record.id,
                        board_id=record.board_id,
                        name=record.name,
                        position=record.position,
                        wip_limit=record.wip_limit,
                        is_done_column=record.is_done_column,
                        tasks=tasks,
                        is_landing=record.id == board.landing_column_id,
                        task_count=count,
                        is_at_capacity=capacity.is_at_capacity(record.wip_limit, count),
                        is_near_capacity=capacity.is_near_capacity(
                            record.wip_limit, count, ratio
                        ),
                    )
                )

            base = Board.from_record(board)
            return BoardWithColumns(
                **base.model_dump(),
                columns=columns,
                total_tasks=len(task_records),
                total_columns=len(columns),
            )

        return self.database.run(load, "get_board_with_columns_and_tasks", read_only=True)

    def list_boards(self, **filters: Any) -> list[Board]:
        """
        List boards, newest first unless ``order_by`` says otherwise.

        Accepts the fields of BoardFilters: search, created_after,
        created_before, take, skip, order_by.
        """
        options = parse_input(BoardFilters, **filters)

        def load(session: Session) -> list[Board]:
            stmt = select(BoardRecord)
            stmt = match_text(stmt, options.search, BoardRecord.name, BoardRecord.goal)
            stmt = apply_date_bounds(
                stmt, BoardRecord.created_at, options.created_after, options.created_before
            )
            default = [BoardRecord.created_at.desc(), BoardRecord.id.desc()]
            stmt = apply_order(stmt, BoardRecord, options.order_by, default)
            stmt = apply_paging(stmt, options.take, options.skip)
            return [Board.from_record(record) for record in session.scalars(stmt)]

        return self.database.run(load, "list_boards", read_only=True)

    def update_board(self, board_id: str, **changes: Any) -> Board:
        """
        Update name, goal or landing column of a board.

        Raises:
            ValidationError: unknown field, invalid value, or a landing column
                from another board
            BoardNotFoundError: board does not exist
        """
        data = parse_input(BoardUpdate, **changes)
        fields = data.changes()

        def update(session: Session) -> Board:
            board = session.get(BoardRecord, board_id)
            if board is None:
                raise BoardNotFoundError(board_id)

            landing_column_id = fields.get("landing_column_id")
            if landing_column_id is not None:
                column = session.get(ColumnRecord, landing_column_id)
                if column is None or column.board_id != board_id:
                    raise ValidationError(
                        f"Column '{landing_column_id}' does not belong to board '{board_id}'",
                        board_id=board_id,
                        landing_column_id=landing_column_id,
                    )

            for name, value in fields.items():
                setattr(board, name, value)
            board.updated_at = now_utc()
            session.flush()
            return Board.from_record(board)

        board = self.database.run(update, "update_board")
        logger.info("Board updated: %s (%s)", board_id, ", ".join(sorted(fields)) or "touch")
        return board

    def delete_board(self, board_id: str) -> int:
        """
        Delete a board with all of its columns and tasks.

        Returns:
            1 if the board was deleted, 0 if it did not exist
        """

        def remove(session: Session) -> int:
            if session.get(BoardRecord, board_id) is None:
                return 0
            column_ids = select(ColumnRecord.id).where(ColumnRecord.board_id == board_id)
            session.execute(
                delete(TaskRecord)
                .where(TaskRecord.column_id.in_(column_ids))
                .execution_options(synchronize_session=False)
            )
            session.execute(
                delete(ColumnRecord)
                .where(ColumnRecord.board_id == board_id)
                .execution_options(synchronize_session=False)
            )
            session.execute(
                delete(BoardRecord)
                .where(BoardRecord.id == board_id)
                .execution_options(synchronize_session=False)
            )
            return 1

        deleted = self.database.run(remove, "delete_board")
        if deleted:
            logger.info("Board deleted: %s", board_id)
        else:
            logger.debug("Board already absent: %s", board_id)
        return deleted