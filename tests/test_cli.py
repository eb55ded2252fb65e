"""Tests for the command line interface."""

import io
import json
from pathlib import Path

import pytest

from kanbanstore.__main__ import main, parse_args
from kanbanstore.factory import create_kanban_service
from kanbanstore.config import Settings


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'cli.db'}"


def run_cli(*argv: str) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(list(argv))
    return exc_info.value.code


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.export is None
        assert args.import_path is None
        assert args.seed is None
        assert args.list_boards is False
        assert args.verbose == 0

    def test_seed_without_file(self):
        assert parse_args(["--seed"]).seed is True

    def test_seed_with_file(self):
        assert parse_args(["--seed", "boards.yml"]).seed == "boards.yml"

    def test_commands_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["--export", "-", "--list-boards"])

    def test_search_requires_list_boards(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--search", "web"])
        assert exc_info.value.code == 2
        assert "--search" in capsys.readouterr().err


class TestCommands:
    """End-to-end runs of each command against a file database."""

    def test_status_on_empty_store(self, db_url: str, capsys):
        assert run_cli("--database-url", db_url) == 0
        out = capsys.readouterr().out
        assert "Database healthy (schema version 3)" in out
        assert "0 boards, 0 columns, 0 tasks" in out

    def test_seed_then_list(self, db_url: str, capsys):
        assert run_cli("--database-url", db_url, "--seed") == 0
        assert "2 boards and 11 tasks" in capsys.readouterr().out

        assert run_cli("--database-url", db_url, "--list-boards", "--search", "mobile") == 0
        out = capsys.readouterr().out
        assert "Mobile App Development" in out
        assert "Website Redesign" not in out

    def test_seed_missing_file(self, db_url: str, tmp_path: Path, capsys):
        assert run_cli("--database-url", db_url, "--seed", str(tmp_path / "nope.yml")) == 1
        assert "Seed file not found" in capsys.readouterr().err

    def test_show_board(self, db_url: str, capsys):
        with create_kanban_service(Settings(database_url=db_url)) as service:
            board = service.create_board(
                "Release",
                "Ship 2.0",
                [
                    {"name": "Todo", "position": 0},
                    {"name": "Done", "position": 1, "is_done_column": True},
                ],
            )
            service.create_task(board.landing_column_id, "Write notes")

        assert run_cli("--database-url", db_url, "--show", board.board_id) == 0
        out = capsys.readouterr().out
        assert "Release" in out
        assert "Todo (1) [landing]" in out
        assert "Done (0) [done]" in out
        assert "0. Write notes" in out

    def test_show_missing_board(self, db_url: str, capsys):
        assert run_cli("--database-url", db_url, "--show", "missing") == 1
        assert "Board not found: missing" in capsys.readouterr().err

    def test_export_to_stdout(self, db_url: str, capsys):
        run_cli("--database-url", db_url, "--seed")
        capsys.readouterr()

        assert run_cli("--database-url", db_url, "--export", "-") == 0
        captured = capsys.readouterr()
        document = json.loads(captured.out)
        assert len(document["boards"]) == 2
        assert len(document["tasks"]) == 11
        assert "Exported 2 boards" in captured.err

    def test_export_import_file(self, tmp_path: Path, capsys):
        source = f"sqlite:///{tmp_path / 'source.db'}"
        target = f"sqlite:///{tmp_path / 'target.db'}"
        dump = tmp_path / "backup" / "dump.json"

        run_cli("--database-url", source, "--seed")
        assert run_cli("--database-url", source, "--export", str(dump)) == 0
        assert dump.exists()

        assert run_cli("--database-url", target, "--import", str(dump)) == 0
        assert "Imported 2 boards, 10 columns, 11 tasks" in capsys.readouterr().out

    def test_import_from_stdin(self, db_url: str, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO('{"boards": [], "columns": [], "tasks": []}'))
        assert run_cli("--database-url", db_url, "--import", "-") == 0
        assert "Imported 0 boards" in capsys.readouterr().out

    def test_import_invalid_json(self, db_url: str, tmp_path: Path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        assert run_cli("--database-url", db_url, "--import", str(bad)) == 1
        assert "Import failed" in capsys.readouterr().err

    def test_import_missing_file(self, db_url: str, tmp_path: Path, capsys):
        assert run_cli("--database-url", db_url, "--import", str(tmp_path / "nope.json")) == 1
        assert "File not found" in capsys.readouterr().err

    def test_invalid_database_url(self, capsys):
        assert run_cli("--database-url", "not a url") == 2
        assert "Invalid settings" in capsys.readouterr().err
