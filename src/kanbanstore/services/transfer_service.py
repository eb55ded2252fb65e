"""Export and import of the whole store as a flat snapshot."""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..errors import StructuralImportError
from ..models import ExportedBoard, ExportedColumn, ExportedTask, Snapshot
from ..repositories.schema import BoardRecord, ColumnRecord, TaskRecord
from .validation import format_errors

if TYPE_CHECKING:
    from ..repositories import Database

logger = logging.getLogger(__name__)

RELATIONS = ("boards", "columns", "tasks")


def check_shape(data: Any) -> None:
    """Top-level snapshot shape: a mapping whose three relations are lists."""
    if not isinstance(data, Mapping):
        raise StructuralImportError(
            f"Import data must be an object, got {type(data).__name__}"
        )
    for relation in RELATIONS:
        if relation not in data:
            raise StructuralImportError(
                f"Import data is missing '{relation}'", relation=relation
            )
        if not isinstance(data[relation], list):
            raise StructuralImportError(
                f"'{relation}' must be a list, got {type(data[relation]).__name__}",
                relation=relation,
            )


def _reject_duplicates(relation: str, ids: list[str]) -> None:
    duplicates = sorted(key for key, count in Counter(ids).items() if count > 1)
    if duplicates:
        raise StructuralImportError(
            f"Duplicate {relation} ids: {', '.join(duplicates)}",
            relation=relation,
            ids=duplicates,
        )


def check_integrity(snapshot: Snapshot) -> None:
    """Reject duplicate ids and dangling references."""
    _reject_duplicates("board", [board.id for board in snapshot.boards])
    _reject_duplicates("column", [column.id for column in snapshot.columns])
    _reject_duplicates("task", [task.id for task in snapshot.tasks])

    board_ids = {board.id for board in snapshot.boards}
    column_board = {column.id: column.board_id for column in snapshot.columns}

    for column in snapshot.columns:
        if column.board_id not in board_ids:
            raise StructuralImportError(
                f"Column '{column.id}' references missing board '{column.board_id}'",
                column_id=column.id,
                board_id=column.board_id,
            )
    for task in snapshot.tasks:
        if task.column_id not in column_board:
            raise StructuralImportError(
                f"Task '{task.id}' references missing column '{task.column_id}'",
                task_id=task.id,
                column_id=task.column_id,
            )
    for board in snapshot.boards:
        landing = board.landing_column_id
        if landing is not None and column_board.get(landing) != board.id:
            raise StructuralImportError(
                f"Board '{board.id}' landing column '{landing}' is not one of its columns",
                board_id=board.id,
                landing_column_id=landing,
            )


def parse_snapshot(data: Any) -> Snapshot:
    """Validate raw import data into a Snapshot without touching storage.

    Raises:
        StructuralImportError: wrong shape, invalid rows, duplicate ids or
            broken references
    """
    if isinstance(data, Snapshot):
        snapshot = data
    else:
        check_shape(data)
        try:
            snapshot = Snapshot.model_validate(
                {relation: data[relation] for relation in RELATIONS}
            )
        except PydanticValidationError as e:
            raise StructuralImportError(f"Invalid import rows: {format_errors(e)}") from e
    check_integrity(snapshot)
    return snapshot


class TransferService:
    """Service for full-store export and replace-all import."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def export_snapshot(self) -> Snapshot:
        """Every board, column and task as flat rows."""

        def dump(session: Session) -> Snapshot:
            boards = session.scalars(
                select(BoardRecord).order_by(BoardRecord.created_at.desc(), BoardRecord.id)
            )
            columns = session.scalars(
                select(ColumnRecord).order_by(ColumnRecord.board_id, ColumnRecord.position)
            )
            tasks = session.scalars(
                select(TaskRecord).order_by(
                    TaskRecord.column_id, TaskRecord.position, TaskRecord.created_at
                )
            )
            return Snapshot(
                boards=[
                    ExportedBoard(
                        id=board.id,
                        name=board.name,
                        goal=board.goal,
                        landing_column_id=board.landing_column_id,
                        created_at=board.created_at,
                        updated_at=board.updated_at,
                    )
                    for board in boards
                ],
                columns=[
                    ExportedColumn(
                        id=column.id,
                        board_id=column.board_id,
                        name=column.name,
                        position=column.position,
                        wip_limit=column.wip_limit,
                        is_done_column=column.is_done_column,
                    )
                    for column in columns
                ],
                tasks=[
                    ExportedTask(
                        id=task.id,
                        column_id=task.column_id,
                        title=task.title,
                        content=task.content,
                        position=task.position,
                        created_at=task.created_at,
                        updated_at=task.updated_at,
                        update_reason=task.update_reason,
                        metadata=task.task_metadata,
                    )
                    for task in tasks
                ],
            )

        snapshot = self.database.run(dump, "export", read_only=True)
        logger.info("Exported %d boards, %d columns, %d tasks", *snapshot.counts)
        return snapshot

    def import_snapshot(self, data: Snapshot | Mapping[str, Any]) -> Snapshot:
        """
        Replace all boards, columns and tasks with ``data``.

        The payload is fully validated before the store is touched; the
        delete and insert then run in one transaction. Capacity and position
        density are taken as given.

        Returns:
            The validated snapshot that was written

        Raises:
            StructuralImportError: malformed or inconsistent payload
        """
        snapshot = parse_snapshot(data)

        def replace(session: Session) -> None:
            session.execute(delete(TaskRecord).execution_options(synchronize_session=False))
            session.execute(delete(ColumnRecord).execution_options(synchronize_session=False))
            session.execute(delete(BoardRecord).execution_options(synchronize_session=False))

            session.add_all(BoardRecord(**board.model_dump()) for board in snapshot.boards)
            session.flush()
            session.add_all(ColumnRecord(**column.model_dump()) for column in snapshot.columns)
            session.flush()
            session.add_all(
                TaskRecord(
                    task_metadata=task.metadata,
                    **task.model_dump(exclude={"metadata"}),
                )
                for task in snapshot.tasks
            )
            session.flush()

        self.database.run(replace, "import")
        logger.info("Imported %d boards, %d columns, %d tasks", *snapshot.counts)
        return snapshot

    def export_to_file(self, path: Path) -> Snapshot:
        """Write the snapshot to ``path`` as JSON."""
        snapshot = self.export_snapshot()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(snapshot.to_json() + "\n", encoding="utf-8")
        logger.info("Wrote export to %s", path)
        return snapshot

    def import_from_file(self, path: Path) -> Snapshot:
        """
        Replace the store with the snapshot stored in ``path``.

        Raises:
            StructuralImportError: file is not valid JSON or not a snapshot
        """
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StructuralImportError(f"{path} is not valid JSON: {e}", path=str(path)) from e
        return self.import_snapshot(data)
