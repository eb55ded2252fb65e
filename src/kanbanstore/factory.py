"""Construction of owned engine handles.

Nothing is cached here: every call opens a new Database, and the caller
closes what it opened.
"""

from __future__ import annotations

import logging

from .config import Settings
from .legacy import LegacyKanbanDB
from .repositories import Database
from .services import KanbanService

logger = logging.getLogger(__name__)

IN_MEMORY_URL = "sqlite://"


def open_database(settings: Settings | None = None, name: str = "default") -> Database:
    """Open a database and create any missing tables.

    Args:
        settings: Engine settings (environment defaults when omitted)
        name: Label used in log messages
    """
    settings = settings or Settings()
    database = Database(settings)
    try:
        database.create_schema()
    except Exception:
        database.close()
        raise
    logger.info("Database '%s' ready", name)
    return database


def open_in_memory_database(settings: Settings | None = None) -> Database:
    """Open a private in-memory SQLite database, mainly for tests."""
    base = settings or Settings()
    return open_database(
        base.model_copy(update={"database_url": IN_MEMORY_URL}), name="memory"
    )


def create_kanban_service(settings: Settings | None = None, name: str = "default") -> KanbanService:
    """Open a database and wrap it in a KanbanService that owns it."""
    return KanbanService(open_database(settings, name))


def create_legacy_database(
    settings: Settings | None = None, name: str = "default"
) -> LegacyKanbanDB:
    """Open a database behind the legacy KanbanDB interface."""
    return LegacyKanbanDB(create_kanban_service(settings, name))
