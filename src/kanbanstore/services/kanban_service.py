"""Single entry point composing the board, column, task and transfer services."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import (
    Board,
    BoardWithColumns,
    Column,
    ColumnDefinition,
    ColumnStatus,
    CreatedBoard,
    DatabaseHealth,
    DatabaseMetrics,
    MostActiveBoard,
    Snapshot,
    Task,
)
from ..repositories.schema import BoardRecord, ColumnRecord, TaskRecord
from .board_service import BoardService
from .column_service import ColumnService
from .task_service import TaskService
from .transfer_service import TransferService

if TYPE_CHECKING:
    from ..repositories import Database

logger = logging.getLogger(__name__)


class KanbanService:
    """
    The engine's operation set over one Database.

    Every method runs in its own transaction. The service owns the
    database handle: ``close()`` (or leaving a ``with`` block) disposes it.
    """

    def __init__(self, database: Database) -> None:
        self.database = database
        self.boards = BoardService(database)
        self.columns = ColumnService(database)
        self.tasks = TaskService(database)
        self.transfer = TransferService(database)

    def __enter__(self) -> KanbanService:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Boards

    def create_board(
        self,
        name: str,
        goal: str = "",
        columns: Iterable[ColumnDefinition | Mapping[str, Any]] = (),
        landing_column_index: int = 0,
    ) -> CreatedBoard:
        return self.boards.create_board(name, goal, columns, landing_column_index)

    def get_board(self, board_id: str) -> Board | None:
        return self.boards.get_board(board_id)

    def get_board_with_columns_and_tasks(self, board_id: str) -> BoardWithColumns | None:
        return self.boards.get_board_with_columns_and_tasks(board_id)

    def list_boards(self, **filters: Any) -> list[Board]:
        return self.boards.list_boards(**filters)

    def update_board(self, board_id: str, **changes: Any) -> Board:
        return self.boards.update_board(board_id, **changes)

    def delete_board(self, board_id: str) -> int:
        return self.boards.delete_board(board_id)

    # Columns

    def get_column(self, column_id: str) -> Column | None:
        return self.columns.get_column(column_id)

    def list_columns(self, board_id: str) -> list[Column]:
        return self.columns.list_columns(board_id)

    def update_column(self, column_id: str, **changes: Any) -> Column:
        return self.columns.update_column(column_id, **changes)

    def get_column_status(self, column_id: str) -> ColumnStatus | None:
        return self.columns.get_column_status(column_id)

    def repair_positions(self, column_id: str) -> int:
        return self.columns.repair_positions(column_id)

    # Tasks

    def create_task(
        self,
        column_id: str,
        title: str,
        content: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> Task:
        return self.tasks.create_task(column_id, title, content, metadata)

    def get_task(self, task_id: str) -> Task | None:
        return self.tasks.get_task(task_id)

    def update_task(self, task_id: str, **changes: Any) -> Task:
        return self.tasks.update_task(task_id, **changes)

    def move_task(
        self,
        task_id: str,
        target_column_id: str,
        position: int | None = None,
        update_reason: str | None = None,
    ) -> None:
        self.tasks.move_task(task_id, target_column_id, position, update_reason)

    def delete_task(self, task_id: str) -> int:
        return self.tasks.delete_task(task_id)

    def list_tasks(self, **filters: Any) -> list[Task]:
        return self.tasks.list_tasks(**filters)

    # Export / import

    def export_snapshot(self) -> Snapshot:
        return self.transfer.export_snapshot()

    def import_snapshot(self, data: Snapshot | Mapping[str, Any]) -> Snapshot:
        return self.transfer.import_snapshot(data)

    def export_to_file(self, path: Path) -> Snapshot:
        return self.transfer.export_to_file(path)

    def import_from_file(self, path: Path) -> Snapshot:
        return self.transfer.import_from_file(path)

    # Health

    def health_check(self) -> DatabaseHealth:
        return self.database.health_check()

    def get_metrics(self) -> DatabaseMetrics:
        """Row counts, per-board averages and the board holding the most tasks."""

        def collect(session: Session) -> DatabaseMetrics:
            total_boards = session.scalar(select(func.count()).select_from(BoardRecord)) or 0
            total_columns = session.scalar(select(func.count()).select_from(ColumnRecord)) or 0
            total_tasks = session.scalar(select(func.count()).select_from(TaskRecord)) or 0

            most_active = None
            row = session.execute(
                select(BoardRecord.id, BoardRecord.name, func.count(TaskRecord.id).label("n"))
                .join(ColumnRecord, ColumnRecord.board_id == BoardRecord.id)
                .join(TaskRecord, TaskRecord.column_id == ColumnRecord.id)
                .group_by(BoardRecord.id, BoardRecord.name)
                .order_by(func.count(TaskRecord.id).desc(), BoardRecord.id)
                .limit(1)
            ).first()
            if row is not None:
                most_active = MostActiveBoard(board_id=row.id, name=row.name, task_count=row.n)

            return DatabaseMetrics(
                total_boards=total_boards,
                total_columns=total_columns,
                total_tasks=total_tasks,
                average_tasks_per_board=total_tasks / total_boards if total_boards else 0.0,
                average_columns_per_board=total_columns / total_boards if total_boards else 0.0,
                most_active_board=most_active,
            )

        return self.database.run(collect, "metrics", read_only=True)

    def close(self) -> None:
        self.database.close()
