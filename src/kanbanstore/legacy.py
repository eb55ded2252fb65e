"""Adapter exposing the older KanbanDB call shape over KanbanService.

Each method is a fixed translation to one engine call. The only behavior
of its own is turning documented "absent" failures into None, [] or 0.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from .errors import BoardNotFoundError, TaskNotFoundError, ValidationError
from .models import Board, BoardWithColumns, Column, CreatedBoard, Task, TaskSummary

if TYPE_CHECKING:
    from .services import KanbanService

logger = logging.getLogger(__name__)

# Older callers send camelCase column definitions
_COLUMN_KEYS = {"wipLimit": "wip_limit", "isDoneColumn": "is_done_column"}


def _column_definition(column: Mapping[str, Any]) -> dict[str, Any]:
    definition = {_COLUMN_KEYS.get(key, key): value for key, value in column.items()}
    definition.setdefault("is_done_column", False)
    if definition["is_done_column"] is None:
        definition["is_done_column"] = False
    return definition


class LegacyKanbanDB:
    """The KanbanDB interface of the previous API generation."""

    def __init__(self, service: KanbanService) -> None:
        self.service = service

    def close(self) -> None:
        self.service.close()

    def create_board(
        self,
        name: str,
        project_goal: str,
        columns: Iterable[Mapping[str, Any]],
        landing_column_position: int,
    ) -> CreatedBoard:
        """Create a board; the landing column is chosen by its position."""
        definitions = [_column_definition(column) for column in columns]
        index = next(
            (i for i, d in enumerate(definitions) if d.get("position") == landing_column_position),
            None,
        )
        if index is None:
            raise ValidationError(
                f"No column has landing position {landing_column_position}",
                landing_column_position=landing_column_position,
            )
        return self.service.create_board(name, project_goal, definitions, index)

    def get_board_by_id(self, board_id: str) -> Board | None:
        return self.service.get_board(board_id)

    def get_column_by_id(self, column_id: str) -> Column | None:
        return self.service.get_column(column_id)

    def get_task_by_id(self, task_id: str) -> Task | None:
        return self.service.get_task(task_id)

    def count_tasks_in_column(self, column_id: str) -> int:
        return len(self.service.list_tasks(column_id=column_id))

    def add_task_to_column(self, column_id: str, title: str, content: str) -> Task:
        return self.service.create_task(column_id, title, content)

    def move_task(self, task_id: str, target_column_id: str, reason: str | None = None) -> None:
        self.service.move_task(task_id, target_column_id, update_reason=reason)

    def get_columns_for_board(self, board_id: str) -> list[Column]:
        try:
            return self.service.list_columns(board_id)
        except BoardNotFoundError:
            return []

    def get_tasks_for_column(self, column_id: str) -> list[TaskSummary]:
        return [
            TaskSummary(
                id=task.id,
                title=task.title,
                position=task.position,
                update_reason=task.update_reason or None,
                created_at=task.created_at,
                updated_at=task.updated_at,
            )
            for task in self.service.list_tasks(column_id=column_id)
        ]

    def get_board_with_columns_and_tasks(self, board_id: str) -> BoardWithColumns | None:
        return self.service.get_board_with_columns_and_tasks(board_id)

    def get_all_boards(self) -> list[Board]:
        return self.service.list_boards()

    def update_task(self, task_id: str, content: str) -> Task | None:
        """Replace a task's content; None if the task does not exist."""
        try:
            return self.service.update_task(task_id, content=content)
        except TaskNotFoundError:
            logger.debug("Legacy update of missing task %s", task_id)
            return None

    def delete_task(self, task_id: str) -> int:
        return self.service.delete_task(task_id)

    def delete_board(self, board_id: str) -> int:
        return self.service.delete_board(board_id)

    def export_database(self) -> dict[str, Any]:
        return self.service.export_snapshot().to_dict()

    def import_database(self, data: Mapping[str, Any]) -> None:
        self.service.import_snapshot(data)
