"""Read-only board commands: list, show and status."""

from ..errors import KanbanError
from ..services import KanbanService
from ..utils import to_iso
from .output import error, header, info, occupancy, success


def run_list_boards(service: KanbanService, search: str | None = None) -> int:
    """Print boards, newest first."""
    try:
        boards = service.list_boards(search=search)
    except KanbanError as e:
        error(f"Could not list boards: {e.message}")
        return 1

    if not boards:
        info("No boards found")
        return 0

    header(f"{len(boards)} board(s)")
    for board in boards:
        info(f"{board.id}  {board.name}  (created {to_iso(board.created_at)})")
    return 0


def run_show_board(service: KanbanService, board_id: str) -> int:
    """Print a board's columns with occupancy and tasks."""
    try:
        board = service.get_board_with_columns_and_tasks(board_id)
    except KanbanError as e:
        error(f"Could not load board: {e.message}")
        return 1

    if board is None:
        error(f"Board not found: {board_id}")
        return 1

    header(board.name)
    if board.goal:
        print(f"  {board.goal}")
    for column in board.columns:
        flags = []
        if column.is_landing:
            flags.append("landing")
        if column.is_done_column:
            flags.append("done")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        count = occupancy(
            column.task_count, column.wip_limit, column.is_at_capacity, column.is_near_capacity
        )
        header(f"\n{column.name} ({count}){suffix}")
        for task in column.tasks:
            reason = f"  <- {task.update_reason}" if task.update_reason else ""
            print(f"  {task.position}. {task.title}{reason}")
    print()
    info(f"{board.total_tasks} tasks in {board.total_columns} columns")
    return 0


def run_status(service: KanbanService) -> int:
    """Print health and row counts."""
    health = service.health_check()
    if not health.is_healthy:
        for message in health.errors:
            error(message)
        return 1

    success(f"Database healthy (schema version {health.schema_version})")
    metrics = service.get_metrics()
    info(
        f"{metrics.total_boards} boards, {metrics.total_columns} columns, "
        f"{metrics.total_tasks} tasks"
    )
    if metrics.most_active_board is not None:
        active = metrics.most_active_board
        info(f"Most active board: {active.name} ({active.task_count} tasks)")
    return 0
