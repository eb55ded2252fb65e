"""CLI entry point for kanbanstore."""

import argparse
from pathlib import Path

from pydantic import ValidationError as SettingsError

from . import __version__
from .cli.output import error
from .config import Settings
from .errors import KanbanError
from .logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="kanbanstore",
        description="Kanban board store: export, import, seed and inspect boards",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (default: sqlite:///./data/kanban.db)",
    )
    commands = parser.add_mutually_exclusive_group()
    commands.add_argument(
        "--export",
        metavar="PATH",
        default=None,
        help="Export all boards, columns and tasks as JSON ('-' for stdout)",
    )
    commands.add_argument(
        "--import",
        dest="import_path",
        metavar="PATH",
        default=None,
        help="Replace the store with a JSON export ('-' for stdin)",
    )
    commands.add_argument(
        "--seed",
        nargs="?",
        const=True,
        default=None,
        metavar="YAML",
        help="Create sample boards. Optionally pass a YAML file of board definitions.",
    )
    commands.add_argument(
        "--list-boards",
        action="store_true",
        help="List boards, newest first",
    )
    commands.add_argument(
        "--show",
        metavar="BOARD_ID",
        default=None,
        help="Show a board with its columns and tasks",
    )
    parser.add_argument(
        "--search",
        default=None,
        help="Filter --list-boards by name or goal",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args(argv)
    if args.search is not None and not args.list_boards:
        parser.error("--search can only be used with --list-boards")
    return args


def run_command(args: argparse.Namespace, settings: Settings) -> int:
    """Open the store and dispatch to the selected command."""
    from .factory import create_kanban_service

    with create_kanban_service(settings) as service:
        if args.export is not None:
            from .cli.transfer import run_export

            return run_export(service, args.export)

        if args.import_path is not None:
            from .cli.transfer import run_import

            return run_import(service, args.import_path)

        if args.seed is not None:
            from .cli.seed import run_seed

            # args.seed is True if flag only, or string if a file was passed
            seed_file = Path(args.seed) if isinstance(args.seed, str) else None
            return run_seed(service, seed_file)

        if args.list_boards:
            from .cli.boards import run_list_boards

            return run_list_boards(service, args.search)

        if args.show is not None:
            from .cli.boards import run_show_board

            return run_show_board(service, args.show)

        from .cli.boards import run_status

        return run_status(service)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    # Build settings from CLI args
    settings_kwargs: dict = {}
    if args.database_url:
        settings_kwargs["database_url"] = args.database_url
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file

    try:
        settings = Settings(**settings_kwargs)
    except SettingsError as e:
        error(f"Invalid settings: {e.errors(include_url=False)[0]['msg']}")
        raise SystemExit(2) from e

    setup_logging(settings.verbose, settings.log_file, settings.echo_sql)

    try:
        exit_code = run_command(args, settings)
    except KanbanError as e:
        error(e.message)
        exit_code = 1
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
