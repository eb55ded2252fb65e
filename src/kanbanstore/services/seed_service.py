"""Sample data for development and demos."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ..errors import BoardNotFoundError, ValidationError
from ..models import ColumnDefinition, CreatedBoard, Snapshot
from .validation import format_errors

if TYPE_CHECKING:
    from .kanban_service import KanbanService

logger = logging.getLogger(__name__)


class SeedTask(BaseModel):
    title: str
    content: str = ""
    metadata: dict[str, Any] | None = None


class SeedColumn(ColumnDefinition):
    """Column definition plus the tasks created in it."""

    tasks: list[SeedTask] = Field(default_factory=list)


class SeedBoard(BaseModel):
    name: str
    goal: str = ""
    landing_column_index: int = 0
    columns: list[SeedColumn]


DEFAULT_BOARDS: list[dict[str, Any]] = [
    {
        "name": "Website Redesign",
        "goal": "Redesign the company website to improve user experience and conversion rates",
        "landing_column_index": 1,
        "columns": [
            {
                "name": "Backlog",
                "position": 0,
                "tasks": [
                    {
                        "title": "Research competitor websites",
                        "content": "Analyze top 5 competitor websites for design patterns and user flows",
                    },
                    {
                        "title": "Create user personas",
                        "content": "Develop detailed user personas based on existing customer data",
                    },
                ],
            },
            {
                "name": "To Do",
                "position": 1,
                "wip_limit": 5,
                "tasks": [
                    {
                        "title": "Design homepage mockup",
                        "content": "Create wireframes and high-fidelity mockups for the new homepage",
                    },
                    {
                        "title": "Set up development environment",
                        "content": "Configure local development environment with build tools and testing framework",
                    },
                ],
            },
            {
                "name": "In Progress",
                "position": 2,
                "wip_limit": 3,
                "tasks": [
                    {
                        "title": "Implement responsive navigation",
                        "content": "Code the responsive navigation component with mobile hamburger menu",
                        "metadata": {"priority": "high", "estimatedHours": 8},
                    },
                ],
            },
            {
                "name": "Review",
                "position": 3,
                "wip_limit": 2,
                "tasks": [
                    {
                        "title": "Review color scheme and typography",
                        "content": "Design review for brand consistency and accessibility compliance",
                    },
                ],
            },
            {"name": "Done", "position": 4, "is_done_column": True},
        ],
    },
    {
        "name": "Mobile App Development",
        "goal": "Develop a cross-platform mobile application for our services",
        "landing_column_index": 0,
        "columns": [
            {
                "name": "Planning",
                "position": 0,
                "tasks": [
                    {
                        "title": "Define app architecture",
                        "content": "Design the overall architecture and technology stack for the mobile app",
                    },
                    {
                        "title": "Create project timeline",
                        "content": "Develop detailed project timeline with milestones and dependencies",
                    },
                ],
            },
            {
                "name": "Development",
                "position": 1,
                "wip_limit": 4,
                "tasks": [
                    {
                        "title": "Set up React Native project",
                        "content": "Initialize React Native project with navigation and state management",
                    },
                    {
                        "title": "Implement user authentication",
                        "content": "Build login/signup screens with biometric authentication support",
                        "metadata": {"priority": "high", "assignee": "john.doe"},
                    },
                ],
            },
            {
                "name": "Testing",
                "position": 2,
                "wip_limit": 2,
                "tasks": [
                    {
                        "title": "Unit test authentication flow",
                        "content": "Write comprehensive unit tests for authentication components",
                    },
                ],
            },
            {"name": "Deployment", "position": 3, "wip_limit": 1},
            {"name": "Released", "position": 4, "is_done_column": True},
        ],
    },
]


def parse_seed(data: Any) -> list[SeedBoard]:
    """
    Validate seed definitions.

    Accepts a list of boards or a mapping with a ``boards`` list.

    Raises:
        ValidationError: definitions do not match the seed shape
    """
    if isinstance(data, dict):
        data = data.get("boards")
    if not isinstance(data, list):
        raise ValidationError("Seed data must be a list of boards")
    try:
        return [SeedBoard.model_validate(board) for board in data]
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid seed data: {format_errors(e)}") from e


def load_seed_file(path: Path) -> list[SeedBoard]:
    """Read seed definitions from a YAML file."""
    with path.open() as f:
        data = yaml.safe_load(f) or []
    return parse_seed(data)


def seed_database(
    service: KanbanService, definitions: list[SeedBoard] | None = None
) -> list[CreatedBoard]:
    """
    Create sample boards and their tasks.

    Uses the built-in boards when ``definitions`` is None. Tasks are
    created through the normal workflow, so WIP limits apply.
    """
    boards = definitions if definitions is not None else parse_seed(DEFAULT_BOARDS)
    logger.info("Seeding %d boards", len(boards))

    created: list[CreatedBoard] = []
    task_count = 0
    for board in boards:
        result = service.create_board(
            board.name,
            board.goal,
            [column.model_dump(exclude={"tasks"}) for column in board.columns],
            board.landing_column_index,
        )
        created.append(result)

        tree = service.get_board_with_columns_and_tasks(result.board_id)
        if tree is None:
            raise BoardNotFoundError(result.board_id)
        for definition in board.columns:
            column = next(c for c in tree.columns if c.position == definition.position)
            for task in definition.tasks:
                service.create_task(column.id, task.title, task.content, task.metadata)
                task_count += 1

    logger.info("Seeding complete: %d boards, %d tasks", len(created), task_count)
    return created


def clear_database(service: KanbanService) -> None:
    """Remove every board, column and task."""
    service.import_snapshot(Snapshot())
    logger.info("Database cleared")
