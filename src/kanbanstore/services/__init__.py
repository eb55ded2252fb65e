"""Services layer for business logic."""

from .board_service import BoardService
from .column_service import ColumnService
from .kanban_service import KanbanService
from .seed_service import clear_database, load_seed_file, seed_database
from .task_service import TaskService
from .transfer_service import TransferService

__all__ = [
    "BoardService",
    "ColumnService",
    "KanbanService",
    "TaskService",
    "TransferService",
    "clear_database",
    "load_seed_file",
    "seed_database",
]
