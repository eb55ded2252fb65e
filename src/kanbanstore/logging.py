"""Logging configuration for kanbanstore."""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path


def setup_logging(verbose: int = 0, log_file: Path | None = None, echo_sql: bool = False) -> None:
    """Configure logging based on verbosity level and optional file output.

    Args:
        verbose: Verbosity level (0=off, 1=INFO, 2+=DEBUG)
        log_file: Optional path to write logs to file
        echo_sql: Also route SQLAlchemy statement logging to the same handlers
    """
    if verbose == 0 and log_file is None:
        # No logging requested
        return

    if verbose >= 2:
        level = logging.DEBUG
    else:
        # -v, or file logging without verbosity
        level = logging.INFO

    logger = logging.getLogger("kanbanstore")
    logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []

    if verbose > 0:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(level)
        stderr_handler.setFormatter(formatter)
        handlers.append(stderr_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for handler in handlers:
        logger.addHandler(handler)

    if echo_sql:
        sql_logger = logging.getLogger("sqlalchemy.engine")
        sql_logger.setLevel(logging.INFO)
        for handler in handlers:
            sql_logger.addHandler(handler)

    level_name = "DEBUG" if verbose >= 2 else "INFO"
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    logger.info("")
    logger.info("=" * 60)
    logger.info("kanbanstore starting | %s | level=%s", timestamp, level_name)
    logger.info("=" * 60)
