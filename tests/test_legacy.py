"""Tests for the legacy KanbanDB adapter."""

import pytest

from kanbanstore.errors import ColumnCapacityFullError, ColumnNotFoundError, ValidationError
from kanbanstore.legacy import LegacyKanbanDB
from kanbanstore.services import KanbanService

LEGACY_COLUMNS = [
    {"name": "Backlog", "position": 0, "wipLimit": 0},
    {"name": "To Do", "position": 1, "wipLimit": 1},
    {"name": "Done", "position": 2, "wipLimit": 0, "isDoneColumn": True},
]


@pytest.fixture
def legacy(service: KanbanService) -> LegacyKanbanDB:
    return LegacyKanbanDB(service)


@pytest.fixture
def legacy_board(legacy: LegacyKanbanDB):
    return legacy.create_board("Legacy", "Old goal", LEGACY_COLUMNS, 1)


class TestLegacyCreateBoard:
    """Tests for the legacy create_board translation."""

    def test_landing_position_and_camel_case_keys(self, legacy: LegacyKanbanDB, legacy_board):
        landing = legacy.get_column_by_id(legacy_board.landing_column_id)
        assert landing.name == "To Do"
        assert landing.wip_limit == 1

        columns = legacy.get_columns_for_board(legacy_board.board_id)
        assert [c.name for c in columns] == ["Backlog", "To Do", "Done"]
        assert columns[2].is_done_column is True
        assert legacy.get_board_by_id(legacy_board.board_id).goal == "Old goal"

    def test_unknown_landing_position(self, legacy: LegacyKanbanDB):
        with pytest.raises(ValidationError):
            legacy.create_board("Legacy", "", LEGACY_COLUMNS, 9)


class TestLegacyLookups:
    """Absent entities map to None or []."""

    def test_absent_entities(self, legacy: LegacyKanbanDB):
        assert legacy.get_board_by_id("missing") is None
        assert legacy.get_column_by_id("missing") is None
        assert legacy.get_task_by_id("missing") is None
        assert legacy.get_board_with_columns_and_tasks("missing") is None
        assert legacy.get_columns_for_board("missing") == []

    def test_get_all_boards(self, legacy: LegacyKanbanDB, legacy_board):
        assert [b.id for b in legacy.get_all_boards()] == [legacy_board.board_id]


class TestLegacyTasks:
    """Task calls go through the same workflow rules."""

    def test_add_count_and_list(self, legacy: LegacyKanbanDB, legacy_board):
        column_id = legacy.get_columns_for_board(legacy_board.board_id)[0].id
        legacy.add_task_to_column(column_id, "First", "Body")
        legacy.add_task_to_column(column_id, "Second", "")

        assert legacy.count_tasks_in_column(column_id) == 2
        summaries = legacy.get_tasks_for_column(column_id)
        assert [s.title for s in summaries] == ["First", "Second"]
        assert summaries[0].update_reason is None

    def test_add_task_errors_propagate(self, legacy: LegacyKanbanDB, legacy_board):
        legacy.add_task_to_column(legacy_board.landing_column_id, "Fills it", "")
        with pytest.raises(ColumnCapacityFullError):
            legacy.add_task_to_column(legacy_board.landing_column_id, "Too many", "")
        with pytest.raises(ColumnNotFoundError):
            legacy.add_task_to_column("missing", "Task", "")

    def test_move_with_reason(self, legacy: LegacyKanbanDB, legacy_board):
        backlog, _, done = legacy.get_columns_for_board(legacy_board.board_id)
        task = legacy.add_task_to_column(backlog.id, "Task", "")

        legacy.move_task(task.id, done.id, "Finished early")

        moved = legacy.get_task_by_id(task.id)
        assert moved.column_id == done.id
        assert moved.update_reason == "Finished early"

    def test_update_task_content(self, legacy: LegacyKanbanDB, legacy_board):
        task = legacy.add_task_to_column(legacy_board.landing_column_id, "Task", "Old")
        updated = legacy.update_task(task.id, "New")
        assert updated.content == "New"
        assert updated.title == "Task"

    def test_update_missing_task_returns_none(self, legacy: LegacyKanbanDB):
        assert legacy.update_task("missing", "content") is None

    def test_update_validation_error_still_raises(self, legacy: LegacyKanbanDB, legacy_board):
        task = legacy.add_task_to_column(legacy_board.landing_column_id, "Task", "")
        with pytest.raises(ValidationError):
            legacy.update_task(task.id, "x" * 10001)

    def test_deletes_return_counts(self, legacy: LegacyKanbanDB, legacy_board):
        task = legacy.add_task_to_column(legacy_board.landing_column_id, "Task", "")
        assert legacy.delete_task(task.id) == 1
        assert legacy.delete_task(task.id) == 0
        assert legacy.delete_board(legacy_board.board_id) == 1
        assert legacy.delete_board(legacy_board.board_id) == 0


class TestLegacyTransfer:
    """Export and import through the adapter."""

    def test_export_import_round_trip(self, legacy: LegacyKanbanDB, legacy_board):
        legacy.add_task_to_column(legacy_board.landing_column_id, "Task", "")
        exported = legacy.export_database()

        assert set(exported) == {"boards", "columns", "tasks"}
        legacy.delete_board(legacy_board.board_id)
        legacy.import_database(exported)

        assert legacy.export_database() == exported

    def test_close_disposes_service(self, legacy: LegacyKanbanDB):
        legacy.close()
        legacy.close()
