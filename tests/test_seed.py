"""Tests for sample data seeding."""

from pathlib import Path

import pytest

from kanbanstore.errors import ValidationError
from kanbanstore.services import KanbanService, clear_database, load_seed_file, seed_database


class TestSeedDatabase:
    """Tests for the built-in sample boards."""

    def test_default_boards(self, service: KanbanService):
        created = seed_database(service)

        assert len(created) == 2
        metrics = service.get_metrics()
        assert metrics.total_boards == 2
        assert metrics.total_columns == 10
        assert metrics.total_tasks == 11

        website = service.get_board_with_columns_and_tasks(created[0].board_id)
        assert website.name == "Website Redesign"
        assert website.landing_column.name == "To Do"
        in_progress = website.column_named("In Progress")
        assert in_progress.wip_limit == 3
        assert in_progress.tasks[0].title == "Implement responsive navigation"

        mobile = service.get_board_with_columns_and_tasks(created[1].board_id)
        assert mobile.landing_column.name == "Planning"
        assert mobile.column_named("Released").is_done_column is True

    def test_clear_database(self, service: KanbanService):
        seed_database(service)
        clear_database(service)
        assert service.get_metrics().total_boards == 0


class TestSeedFile:
    """Tests for YAML seed definitions."""

    def test_load_yaml(self, service: KanbanService, tmp_path: Path):
        path = tmp_path / "seed.yml"
        path.write_text(
            "boards:\n"
            "  - name: Team\n"
            "    goal: Weekly work\n"
            "    landing_column_index: 0\n"
            "    columns:\n"
            "      - name: Inbox\n"
            "        position: 0\n"
            "        tasks:\n"
            "          - title: Triage\n"
            "            metadata:\n"
            "              owner: sam\n"
            "      - name: Done\n"
            "        position: 1\n"
            "        is_done_column: true\n"
        )

        created = seed_database(service, load_seed_file(path))

        tasks = service.list_tasks(board_id=created[0].board_id)
        assert [t.title for t in tasks] == ["Triage"]
        assert tasks[0].metadata == {"owner": "sam"}

    def test_bad_yaml_shape(self, tmp_path: Path):
        path = tmp_path / "seed.yml"
        path.write_text("name: not a list\n")
        with pytest.raises(ValidationError):
            load_seed_file(path)

    def test_invalid_board_definition(self, tmp_path: Path):
        path = tmp_path / "seed.yml"
        path.write_text("- goal: missing name\n  columns: []\n")
        with pytest.raises(ValidationError, match="name"):
            load_seed_file(path)
