"""Data models for kanbanstore."""

from .board import (
    BOARD_NAME_MAX_LENGTH,
    GOAL_MAX_LENGTH,
    MAX_COLUMNS,
    Board,
    BoardCreate,
    BoardUpdate,
    BoardWithColumns,
    CreatedBoard,
)
from .column import (
    COLUMN_NAME_MAX_LENGTH,
    WIP_LIMIT_MAX,
    Column,
    ColumnDefinition,
    ColumnStatus,
    ColumnUpdate,
    ColumnWithTasks,
)
from .filters import BoardFilters, QueryOptions, TaskFilters
from .snapshot import ExportedBoard, ExportedColumn, ExportedTask, Snapshot
from .stats import DatabaseHealth, DatabaseMetrics, MostActiveBoard
from .task import (
    CONTENT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    UPDATE_REASON_MAX_LENGTH,
    Task,
    TaskCreate,
    TaskMove,
    TaskSummary,
    TaskUpdate,
)

__all__ = [
    "BOARD_NAME_MAX_LENGTH",
    "COLUMN_NAME_MAX_LENGTH",
    "CONTENT_MAX_LENGTH",
    "GOAL_MAX_LENGTH",
    "MAX_COLUMNS",
    "TITLE_MAX_LENGTH",
    "UPDATE_REASON_MAX_LENGTH",
    "WIP_LIMIT_MAX",
    "Board",
    "BoardCreate",
    "BoardFilters",
    "BoardUpdate",
    "BoardWithColumns",
    "Column",
    "ColumnDefinition",
    "ColumnStatus",
    "ColumnUpdate",
    "ColumnWithTasks",
    "CreatedBoard",
    "DatabaseHealth",
    "DatabaseMetrics",
    "ExportedBoard",
    "ExportedColumn",
    "ExportedTask",
    "MostActiveBoard",
    "QueryOptions",
    "Snapshot",
    "Task",
    "TaskCreate",
    "TaskFilters",
    "TaskMove",
    "TaskSummary",
    "TaskUpdate",
]
