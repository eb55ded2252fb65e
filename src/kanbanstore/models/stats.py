"""Health and usage statistics for the store."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import DomainModel


class DatabaseHealth(DomainModel):
    """Result of a health probe. Failures are listed in ``errors``."""

    is_healthy: bool
    schema_version: int | None = None
    last_migration: datetime | None = None
    uptime_seconds: float = 0.0
    errors: list[str] = Field(default_factory=list)


class MostActiveBoard(DomainModel):
    board_id: str
    name: str
    task_count: int


class DatabaseMetrics(DomainModel):
    """Row counts and averages across all boards."""

    total_boards: int = 0
    total_columns: int = 0
    total_tasks: int = 0
    average_tasks_per_board: float = 0.0
    average_columns_per_board: float = 0.0
    most_active_board: MostActiveBoard | None = None
