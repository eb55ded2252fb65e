"""Export and import commands."""

import json
import logging
import sys
from pathlib import Path

from ..errors import KanbanError, StructuralImportError
from ..services import KanbanService
from .output import error, success

logger = logging.getLogger(__name__)

STDIO = "-"


def run_export(service: KanbanService, target: str) -> int:
    """Write a snapshot to ``target`` (``-`` for stdout)."""
    try:
        if target == STDIO:
            snapshot = service.export_snapshot()
            sys.stdout.write(snapshot.to_json() + "\n")
            stream = sys.stderr
        else:
            snapshot = service.export_to_file(Path(target))
            stream = sys.stdout
    except KanbanError as e:
        error(f"Export failed: {e.message}")
        return 1

    boards, columns, tasks = snapshot.counts
    success(f"Exported {boards} boards, {columns} columns, {tasks} tasks", stream=stream)
    return 0


def run_import(service: KanbanService, source: str) -> int:
    """Replace the store with the snapshot in ``source`` (``-`` for stdin)."""
    try:
        if source == STDIO:
            try:
                data = json.load(sys.stdin)
            except json.JSONDecodeError as e:
                raise StructuralImportError(f"stdin is not valid JSON: {e}") from e
            snapshot = service.import_snapshot(data)
        else:
            path = Path(source)
            if not path.exists():
                error(f"File not found: {path}")
                return 1
            snapshot = service.import_from_file(path)
    except KanbanError as e:
        error(f"Import failed: {e.message}")
        return 1

    boards, columns, tasks = snapshot.counts
    success(f"Imported {boards} boards, {columns} columns, {tasks} tasks")
    return 0
