"""Integration tests for board lifecycle operations."""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from kanbanstore.errors import BoardNotFoundError, ValidationError
from kanbanstore.models import CreatedBoard
from kanbanstore.repositories import BoardRecord, ColumnRecord, Database, TaskRecord
from kanbanstore.services import KanbanService
from kanbanstore.utils import now_utc

from conftest import SPRINT_COLUMNS, column_ids


def count_rows(database: Database, record: type) -> int:
    with database.transaction("count", read_only=True) as session:
        return session.scalar(select(func.count()).select_from(record))


class TestCreateBoard:
    """Tests for create_board."""

    def test_creates_board_columns_and_landing(self, service: KanbanService):
        created = service.create_board("Sprint 1", "Ship it", SPRINT_COLUMNS, 1)

        board = service.get_board(created.board_id)
        assert board is not None
        assert board.name == "Sprint 1"
        assert board.goal == "Ship it"
        assert board.landing_column_id == created.landing_column_id
        assert board.created_at.tzinfo is not None

        columns = service.list_columns(created.board_id)
        assert [c.name for c in columns] == ["To Do", "Doing", "Done"]
        assert [c.position for c in columns] == [0, 1, 2]
        assert columns[1].id == created.landing_column_id
        assert columns[1].wip_limit == 2
        assert columns[2].is_done_column is True

    def test_landing_index_follows_list_order(self, service: KanbanService):
        cols = [
            {"name": "Later", "position": 1},
            {"name": "First", "position": 0},
        ]
        created = service.create_board("Board", "", cols, 0)
        landing = service.get_column(created.landing_column_id)
        assert landing.name == "Later"
        assert landing.position == 1

    def test_accepts_column_definition_models(self, service: KanbanService):
        from kanbanstore.models import ColumnDefinition

        created = service.create_board(
            "Board", "", [ColumnDefinition(name="Only", position=0, wip_limit=3)]
        )
        assert service.get_column(created.landing_column_id).wip_limit == 3

    def test_returns_created_board_tuple(self, service: KanbanService):
        created = service.create_board("Board", "", [{"name": "Only", "position": 0}])
        assert isinstance(created, CreatedBoard)
        board_id, landing_id = created
        assert board_id == created.board_id
        assert landing_id == created.landing_column_id

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"name": "", "columns": [{"name": "A", "position": 0}]},
            {"name": "B", "columns": []},
            {"name": "B", "columns": [{"name": "A", "position": 0, "wip_limit": 101}]},
            {"name": "B", "columns": [{"name": "A", "position": 0}], "landing_column_index": 1},
            {"name": "B", "columns": [{"name": "A", "position": 1}]},
        ],
    )
    def test_invalid_input_persists_nothing(
        self, service: KanbanService, database: Database, kwargs: dict
    ):
        with pytest.raises(ValidationError):
            service.create_board(**kwargs)

        assert count_rows(database, BoardRecord) == 0
        assert count_rows(database, ColumnRecord) == 0

    def test_validation_error_keeps_field_messages(self, service: KanbanService):
        with pytest.raises(ValidationError) as exc_info:
            service.create_board("x" * 300, "", [{"name": "A", "position": 0}])

        assert "name" in exc_info.value.message
        assert exc_info.value.context["errors"]


class TestGetBoardTree:
    """Tests for get_board_with_columns_and_tasks."""

    def test_missing_board_returns_none(self, service: KanbanService):
        assert service.get_board("missing") is None
        assert service.get_board_with_columns_and_tasks("missing") is None

    def test_tree_orders_and_flags(self, service: KanbanService, sprint_board: CreatedBoard):
        ids = column_ids(service, sprint_board.board_id)
        first = service.create_task(ids["Doing"], "First")
        second = service.create_task(ids["Doing"], "Second")
        service.create_task(ids["To Do"], "Waiting")

        tree = service.get_board_with_columns_and_tasks(sprint_board.board_id)

        assert tree.total_columns == 3
        assert tree.total_tasks == 3
        assert [c.name for c in tree.columns] == ["To Do", "Doing", "Done"]
        assert tree.landing_column.name == "To Do"

        doing = tree.column_named("Doing")
        assert [t.id for t in doing.tasks] == [first.id, second.id]
        assert [t.position for t in doing.tasks] == [0, 1]
        assert doing.task_count == 2
        assert doing.is_at_capacity is True
        assert doing.is_near_capacity is True

        todo = tree.column_named("To Do")
        assert todo.is_landing is True
        assert todo.is_at_capacity is False
        assert todo.is_near_capacity is False

    def test_tree_serializes_with_camel_case(
        self, service: KanbanService, sprint_board: CreatedBoard
    ):
        tree = service.get_board_with_columns_and_tasks(sprint_board.board_id)
        dumped = tree.model_dump(by_alias=True)
        assert dumped["totalColumns"] == 3
        assert dumped["columns"][0]["isLanding"] is True
        assert "isAtCapacity" in dumped["columns"][1]


class TestListBoards:
    """Tests for list_boards."""

    def test_newest_first(self, service: KanbanService):
        names = ["Alpha", "Beta", "Gamma"]
        for name in names:
            service.create_board(name, "", [{"name": "Col", "position": 0}])

        boards = service.list_boards()
        assert [b.name for b in boards] == ["Gamma", "Beta", "Alpha"]

    def test_search_name_and_goal_case_insensitive(self, service: KanbanService):
        service.create_board("Website", "Marketing refresh", [{"name": "C", "position": 0}])
        service.create_board("Mobile", "Ship the APP", [{"name": "C", "position": 0}])
        service.create_board("Infra", "Servers", [{"name": "C", "position": 0}])

        assert [b.name for b in service.list_boards(search="website")] == ["Website"]
        assert [b.name for b in service.list_boards(search="app")] == ["Mobile"]
        assert service.list_boards(search="nothing") == []

    def test_search_treats_wildcards_literally(self, service: KanbanService):
        service.create_board("100% done", "", [{"name": "C", "position": 0}])
        service.create_board("Other", "", [{"name": "C", "position": 0}])

        assert [b.name for b in service.list_boards(search="%")] == ["100% done"]

    def test_take_skip_and_order(self, service: KanbanService):
        for name in ["b", "c", "a"]:
            service.create_board(name, "", [{"name": "C", "position": 0}])

        boards = service.list_boards(order_by={"name": "asc"}, skip=1, take=1)
        assert [b.name for b in boards] == ["b"]

    def test_date_bounds(self, service: KanbanService):
        service.create_board("Board", "", [{"name": "C", "position": 0}])
        now = now_utc()

        assert len(service.list_boards(created_after=now - timedelta(minutes=1))) == 1
        assert service.list_boards(created_after=now + timedelta(minutes=1)) == []
        assert service.list_boards(created_before=now - timedelta(minutes=1)) == []

    def test_unknown_filter_rejected(self, service: KanbanService):
        with pytest.raises(ValidationError):
            service.list_boards(owner="me")


class TestUpdateBoard:
    """Tests for update_board."""

    def test_updates_fields_and_bumps_timestamp(
        self, service: KanbanService, sprint_board: CreatedBoard
    ):
        before = service.get_board(sprint_board.board_id)
        updated = service.update_board(sprint_board.board_id, name="Sprint 2", goal="")

        assert updated.name == "Sprint 2"
        assert updated.goal == ""
        assert updated.updated_at >= before.updated_at
        assert service.get_board(sprint_board.board_id).name == "Sprint 2"

    def test_change_landing_column(self, service: KanbanService, sprint_board: CreatedBoard):
        ids = column_ids(service, sprint_board.board_id)
        updated = service.update_board(sprint_board.board_id, landing_column_id=ids["Doing"])
        assert updated.landing_column_id == ids["Doing"]

    def test_landing_column_from_other_board_rejected(
        self, service: KanbanService, sprint_board: CreatedBoard
    ):
        other = service.create_board("Other", "", [{"name": "C", "position": 0}])
        with pytest.raises(ValidationError, match="does not belong"):
            service.update_board(sprint_board.board_id, landing_column_id=other.landing_column_id)

        board = service.get_board(sprint_board.board_id)
        assert board.landing_column_id == sprint_board.landing_column_id

    def test_missing_board(self, service: KanbanService):
        with pytest.raises(BoardNotFoundError):
            service.update_board("missing", name="X")

    def test_unknown_key_rejected(self, service: KanbanService, sprint_board: CreatedBoard):
        with pytest.raises(ValidationError):
            service.update_board(sprint_board.board_id, columns=[])


class TestDeleteBoard:
    """Tests for delete_board."""

    def test_cascades_to_columns_and_tasks(
        self, service: KanbanService, database: Database, sprint_board: CreatedBoard
    ):
        other = service.create_board("Keep", "", [{"name": "C", "position": 0}])
        service.create_task(other.landing_column_id, "Keep me")
        ids = column_ids(service, sprint_board.board_id)
        service.create_task(ids["To Do"], "One")
        service.create_task(ids["Doing"], "Two")

        assert service.delete_board(sprint_board.board_id) == 1

        assert service.get_board(sprint_board.board_id) is None
        assert count_rows(database, BoardRecord) == 1
        assert count_rows(database, ColumnRecord) == 1
        assert count_rows(database, TaskRecord) == 1
        assert [t.title for t in service.list_tasks()] == ["Keep me"]

    def test_delete_absent_board_returns_zero(self, service: KanbanService):
        assert service.delete_board("missing") == 0

    def test_delete_twice(self, service: KanbanService, sprint_board: CreatedBoard):
        assert service.delete_board(sprint_board.board_id) == 1
        assert service.delete_board(sprint_board.board_id) == 0
