"""Column domain models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field, model_validator

from .base import DomainModel, InputModel, OptionalPlainText, PlainText
from .task import TaskSummary

if TYPE_CHECKING:
    from ..repositories.schema import ColumnRecord

COLUMN_NAME_MAX_LENGTH = 100
WIP_LIMIT_MAX = 100


class Column(DomainModel):
    """A column of a board. ``wip_limit == 0`` means unlimited."""

    id: str
    board_id: str
    name: str
    position: int
    wip_limit: int = 0
    is_done_column: bool = False

    @classmethod
    def from_record(cls, record: ColumnRecord) -> Column:
        """Build a Column from its database row."""
        return cls(
            id=record.id,
            board_id=record.board_id,
            name=record.name,
            position=record.position,
            wip_limit=record.wip_limit,
            is_done_column=record.is_done_column,
        )


class ColumnWithTasks(Column):
    """Column with its ordered tasks and derived capacity flags."""

    tasks: list[TaskSummary] = Field(default_factory=list)
    is_landing: bool = False
    task_count: int = 0
    is_at_capacity: bool = False
    is_near_capacity: bool = False


class ColumnStatus(DomainModel):
    """Occupancy summary of a column.

    ``available_capacity`` is None for unlimited columns.
    """

    column_id: str
    task_count: int
    wip_limit: int
    is_at_capacity: bool
    is_near_capacity: bool
    available_capacity: int | None


class ColumnDefinition(InputModel):
    """One column requested at board creation."""

    name: PlainText = Field(..., min_length=1, max_length=COLUMN_NAME_MAX_LENGTH)
    position: int = Field(..., ge=0)
    wip_limit: int = Field(default=0, ge=0, le=WIP_LIMIT_MAX)
    is_done_column: bool = False


class ColumnUpdate(InputModel):
    """Partial update of a column (rename, limit and done-flag edits only)."""

    name: OptionalPlainText = Field(default=None, min_length=1, max_length=COLUMN_NAME_MAX_LENGTH)
    wip_limit: int | None = Field(default=None, ge=0, le=WIP_LIMIT_MAX)
    is_done_column: bool | None = None

    @model_validator(mode="after")
    def reject_null_fields(self) -> ColumnUpdate:
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
