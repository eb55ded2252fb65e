"""Shared fixtures: a fresh SQLite file database per test."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from kanbanstore.config import Settings
from kanbanstore.factory import open_database
from kanbanstore.models import CreatedBoard
from kanbanstore.repositories import Database
from kanbanstore.services import KanbanService


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a database file in the test's temp directory."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'kanban.db'}",
        retry_backoff=0.01,
    )


@pytest.fixture
def database(settings: Settings) -> Iterator[Database]:
    """Open database with schema created."""
    db = open_database(settings, name="test")
    yield db
    db.close()


@pytest.fixture
def service(database: Database) -> KanbanService:
    """KanbanService over the test database."""
    return KanbanService(database)


SPRINT_COLUMNS = [
    {"name": "To Do", "position": 0, "wip_limit": 0},
    {"name": "Doing", "position": 1, "wip_limit": 2},
    {"name": "Done", "position": 2, "wip_limit": 0, "is_done_column": True},
]


@pytest.fixture
def sprint_board(service: KanbanService) -> CreatedBoard:
    """Board with To Do (unlimited), Doing (wip 2) and Done; lands in To Do."""
    return service.create_board("Sprint 1", "Ship the release", SPRINT_COLUMNS, 0)


def column_ids(service: KanbanService, board_id: str) -> dict[str, str]:
    """Map column name to id for a board."""
    return {column.name: column.id for column in service.list_columns(board_id)}


def positions_of(service: KanbanService, column_id: str) -> list[int]:
    """Task positions of a column in order."""
    return [task.position for task in service.list_tasks(column_id=column_id)]
