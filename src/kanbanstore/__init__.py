"""kanbanstore - persistence and workflow-integrity engine for kanban boards."""

__version__ = "0.1.0"

from .config import Settings
from .errors import (
    BoardNotFoundError,
    BusinessRuleError,
    ColumnCapacityFullError,
    ColumnNotFoundError,
    ContentionError,
    KanbanError,
    NotFoundError,
    StorageError,
    StructuralImportError,
    TaskNotFoundError,
    ValidationError,
)
from .factory import (
    create_kanban_service,
    create_legacy_database,
    open_database,
    open_in_memory_database,
)
from .legacy import LegacyKanbanDB
from .repositories import Database
from .services import KanbanService, seed_database

__all__ = [
    "BoardNotFoundError",
    "BusinessRuleError",
    "ColumnCapacityFullError",
    "ColumnNotFoundError",
    "ContentionError",
    "Database",
    "KanbanError",
    "KanbanService",
    "LegacyKanbanDB",
    "NotFoundError",
    "Settings",
    "StorageError",
    "StructuralImportError",
    "TaskNotFoundError",
    "ValidationError",
    "__version__",
    "create_kanban_service",
    "create_legacy_database",
    "open_database",
    "open_in_memory_database",
    "seed_database",
]
