"""Board domain models."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, NamedTuple

from pydantic import Field, model_validator

from ..utils import as_utc
from .base import DomainModel, InputModel, OptionalPlainText, PlainText
from .column import ColumnDefinition, ColumnWithTasks

if TYPE_CHECKING:
    from ..repositories.schema import BoardRecord

BOARD_NAME_MAX_LENGTH = 255
GOAL_MAX_LENGTH = 5000
MAX_COLUMNS = 20


class Board(DomainModel):
    """A kanban board."""

    id: str
    name: str
    goal: str = ""
    landing_column_id: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: BoardRecord) -> Board:
        """Build a Board from its database row."""
        return cls(
            id=record.id,
            name=record.name,
            goal=record.goal,
            landing_column_id=record.landing_column_id,
            created_at=as_utc(record.created_at),
            updated_at=as_utc(record.updated_at),
        )


class BoardWithColumns(Board):
    """Board tree: columns ordered by position, each with its tasks."""

    columns: list[ColumnWithTasks] = Field(default_factory=list)
    total_tasks: int = 0
    total_columns: int = 0

    @property
    def landing_column(self) -> ColumnWithTasks | None:
        for column in self.columns:
            if column.is_landing:
                return column
        return None

    def column_named(self, name: str) -> ColumnWithTasks | None:
        """First column with the given name, if any."""
        for column in self.columns:
            if column.name == name:
                return column
        return None


class CreatedBoard(NamedTuple):
    """Identifiers returned by board creation."""

    board_id: str
    landing_column_id: str


class BoardCreate(InputModel):
    """Input for creating a board with its columns."""

    name: PlainText = Field(..., min_length=1, max_length=BOARD_NAME_MAX_LENGTH)
    goal: str = Field(default="", max_length=GOAL_MAX_LENGTH)
    columns: list[ColumnDefinition] = Field(..., min_length=1, max_length=MAX_COLUMNS)
    landing_column_index: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_columns(self) -> BoardCreate:
        """Landing index must be in range; positions must be unique and dense."""
        if self.landing_column_index >= len(self.columns):
            raise ValueError(
                f"landing_column_index {self.landing_column_index} is out of bounds "
                f"for {len(self.columns)} columns"
            )
        positions = sorted(col.position for col in self.columns)
        if positions != list(range(len(self.columns))):
            raise ValueError(
                f"column positions must be unique and cover 0..{len(self.columns) - 1}, "
                f"got {positions}"
            )
        return self


class BoardUpdate(InputModel):
    """Partial update of a board."""

    name: OptionalPlainText = Field(default=None, min_length=1, max_length=BOARD_NAME_MAX_LENGTH)
    goal: str | None = Field(default=None, max_length=GOAL_MAX_LENGTH)
    landing_column_id: str | None = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def reject_null_fields(self) -> BoardUpdate:
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
