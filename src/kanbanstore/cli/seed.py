"""Seed command for loading sample boards."""

import logging
from pathlib import Path

from ..errors import KanbanError
from ..services import KanbanService, load_seed_file, seed_database
from .output import error, info, success

logger = logging.getLogger(__name__)


def run_seed(service: KanbanService, seed_file: Path | None = None) -> int:
    """Create sample boards from ``seed_file`` or the built-in set."""
    definitions = None
    if seed_file is not None:
        if not seed_file.exists():
            error(f"Seed file not found: {seed_file}")
            return 1
        info(f"Loading seed definitions from {seed_file}")

    try:
        if seed_file is not None:
            definitions = load_seed_file(seed_file)
        created = seed_database(service, definitions)
    except KanbanError as e:
        error(f"Seeding failed: {e.message}")
        return 1

    for board in created:
        success(f"Created board {board.board_id}")
    metrics = service.get_metrics()
    info(
        f"Database now holds {metrics.total_boards} boards "
        f"and {metrics.total_tasks} tasks"
    )
    return 0
