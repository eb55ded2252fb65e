"""Engine settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError


class Settings(BaseSettings):
    """Engine settings, overridable through ``KANBANSTORE_*`` environment variables."""

    database_url: str = Field(
        default="sqlite:///./data/kanban.db",
        description="SQLAlchemy database URL",
    )

    pool_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Connection pool size (ignored for in-memory SQLite)",
    )

    busy_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for a locked SQLite database",
    )

    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts made for a transaction failing on contention",
    )

    retry_backoff: float = Field(
        default=0.1,
        ge=0,
        description="Base delay in seconds; attempt n sleeps retry_backoff * 2**n",
    )

    compact_positions: bool = Field(
        default=True,
        description="Close position gaps when a task leaves a column",
    )

    near_capacity_ratio: float = Field(
        default=0.8,
        gt=0,
        le=1,
        description="Fraction of the WIP limit at which a column counts as nearly full",
    )

    echo_sql: bool = Field(
        default=False,
        description="Log emitted SQL through the sqlalchemy.engine logger",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "KANBANSTORE_",
    }

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Reject URLs SQLAlchemy cannot parse."""
        try:
            make_url(v)
        except ArgumentError as e:
            raise ValueError(f"Invalid database URL: {v}") from e
        return v

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured backend is SQLite."""
        return make_url(self.database_url).get_backend_name() == "sqlite"

    @property
    def is_memory(self) -> bool:
        """Whether the configured backend is an in-memory SQLite database."""
        if not self.is_sqlite:
            return False
        database = make_url(self.database_url).database
        return database in (None, "", ":memory:")

    @property
    def sqlite_path(self) -> Path | None:
        """Filesystem path of a file-backed SQLite database."""
        if not self.is_sqlite or self.is_memory:
            return None
        return Path(make_url(self.database_url).database)
