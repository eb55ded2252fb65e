"""Persistence layer: schema, engine and transactions."""

from .database import Database
from .retry import with_retry
from .schema import (
    SCHEMA_VERSION,
    Base,
    BoardRecord,
    ColumnRecord,
    DatabaseInfoRecord,
    TaskRecord,
    new_id,
)

__all__ = [
    "SCHEMA_VERSION",
    "Base",
    "BoardRecord",
    "ColumnRecord",
    "Database",
    "DatabaseInfoRecord",
    "TaskRecord",
    "new_id",
    "with_retry",
]
