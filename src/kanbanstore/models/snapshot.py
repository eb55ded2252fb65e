"""Flat export/import snapshot of the whole store.

The field names match the persisted layout (snake_case), which is the
contract backup and migration tooling depends on:

    {"boards": [...], "columns": [...], "tasks": [...]}
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..utils import as_utc


class _SnapshotRow(BaseModel):
    @field_validator("created_at", "updated_at", check_fields=False)
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class ExportedBoard(_SnapshotRow):
    """One row of the boards relation."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    goal: str = ""
    landing_column_id: str | None = None
    created_at: datetime
    updated_at: datetime


class ExportedColumn(BaseModel):
    """One row of the columns relation."""

    id: str = Field(..., min_length=1)
    board_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    position: int = Field(..., ge=0)
    wip_limit: int = Field(default=0, ge=0)
    is_done_column: bool = False  # older exports store 0/1


class ExportedTask(_SnapshotRow):
    """One row of the tasks relation."""

    id: str = Field(..., min_length=1)
    column_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    content: str = ""
    position: int = Field(..., ge=0)
    created_at: datetime
    updated_at: datetime
    update_reason: str | None = None
    metadata: dict[str, Any] | None = None

    @field_validator("update_reason", mode="before")
    @classmethod
    def blank_reason_to_none(cls, v: Any) -> Any:
        if v == "":
            return None
        return v

    @field_validator("metadata", mode="before")
    @classmethod
    def decode_metadata(cls, v: Any) -> Any:
        """Older exports carry metadata as a JSON-encoded string."""
        if isinstance(v, str):
            if not v:
                return None
            try:
                return json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError(f"metadata is not valid JSON: {e}") from e
        return v


class Snapshot(BaseModel):
    """Every board, column and task in the store, with foreign keys as ids."""

    boards: list[ExportedBoard] = Field(default_factory=list)
    columns: list[ExportedColumn] = Field(default_factory=list)
    tasks: list[ExportedTask] = Field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """JSON-compatible document (ISO-8601 timestamps)."""
        return self.model_dump(mode="json")

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @property
    def counts(self) -> tuple[int, int, int]:
        """(boards, columns, tasks)"""
        return len(self.boards), len(self.columns), len(self.tasks)
