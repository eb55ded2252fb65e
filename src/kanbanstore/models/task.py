"""Task domain model and operation inputs."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import Field, field_validator, model_validator

from ..utils import as_utc
from .base import DomainModel, InputModel, OptionalPlainText, PlainText

if TYPE_CHECKING:
    from ..repositories.schema import TaskRecord

TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 10000
UPDATE_REASON_MAX_LENGTH = 500


def _blank_to_none(v: Any) -> Any:
    """An empty or whitespace-only reason clears it."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


class Task(DomainModel):
    """A task resident in a column at a position."""

    id: str
    column_id: str
    title: str
    content: str = ""
    position: int
    update_reason: str | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: TaskRecord) -> Task:
        """Build a Task from its database row."""
        return cls(
            id=record.id,
            column_id=record.column_id,
            title=record.title,
            content=record.content,
            position=record.position,
            update_reason=record.update_reason,
            metadata=record.task_metadata,
            created_at=as_utc(record.created_at),
            updated_at=as_utc(record.updated_at),
        )

    @property
    def has_update_reason(self) -> bool:
        return bool(self.update_reason)


class TaskSummary(DomainModel):
    """Compact task shape used inside a board tree."""

    id: str
    title: str
    position: int
    update_reason: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: TaskRecord) -> TaskSummary:
        return cls(
            id=record.id,
            title=record.title,
            position=record.position,
            update_reason=record.update_reason,
            created_at=as_utc(record.created_at),
            updated_at=as_utc(record.updated_at),
        )


class TaskCreate(InputModel):
    """Input for creating a task."""

    title: PlainText = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(default="", max_length=CONTENT_MAX_LENGTH)
    metadata: dict[str, Any] | None = None


class TaskUpdate(InputModel):
    """Partial update of a task; only fields explicitly passed are applied.

    ``update_reason=None`` or a blank reason clears it. ``title`` and ``content`` cannot
    be set to None.
    """

    title: OptionalPlainText = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, max_length=CONTENT_MAX_LENGTH)
    update_reason: str | None = Field(
        default=None, min_length=1, max_length=UPDATE_REASON_MAX_LENGTH
    )
    metadata: dict[str, Any] | None = None

    @field_validator("update_reason", mode="before")
    @classmethod
    def blank_reason_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @model_validator(mode="after")
    def reject_null_text(self) -> TaskUpdate:
        for name in ("title", "content"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class TaskMove(InputModel):
    """Input for moving a task."""

    target_column_id: str = Field(..., min_length=1)
    position: int | None = Field(default=None, ge=0)
    update_reason: str | None = Field(
        default=None, min_length=1, max_length=UPDATE_REASON_MAX_LENGTH
    )

    @field_validator("update_reason", mode="before")
    @classmethod
    def blank_reason_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)
