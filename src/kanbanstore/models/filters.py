"""Query filters for listing boards and tasks."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Literal

from pydantic import Field, field_validator

from .base import InputModel

SortDirection = Literal["asc", "desc"]


class QueryOptions(InputModel):
    """Pagination and ordering shared by list operations."""

    SORTABLE: ClassVar[tuple[str, ...]] = ()

    take: int | None = Field(default=None, ge=0)
    skip: int | None = Field(default=None, ge=0)
    order_by: dict[str, SortDirection] | None = None

    @field_validator("order_by")
    @classmethod
    def validate_order_by(
        cls, v: dict[str, SortDirection] | None
    ) -> dict[str, SortDirection] | None:
        """Only whitelisted fields may be sorted on."""
        if v is None:
            return v
        unknown = [key for key in v if key not in cls.SORTABLE]
        if unknown:
            raise ValueError(
                f"cannot order by {', '.join(unknown)}; valid: {', '.join(cls.SORTABLE)}"
            )
        return v


class BoardFilters(QueryOptions):
    """Filters for listing boards. Default order is newest first."""

    SORTABLE: ClassVar[tuple[str, ...]] = ("name", "created_at", "updated_at")

    search: str | None = None  # case-insensitive substring of name or goal
    created_after: datetime | None = None
    created_before: datetime | None = None


class TaskFilters(QueryOptions):
    """Filters for listing tasks. Default order is by position."""

    SORTABLE: ClassVar[tuple[str, ...]] = ("position", "title", "created_at", "updated_at")

    board_id: str | None = None
    column_id: str | None = None
    search: str | None = None  # case-insensitive substring of title or content
    has_update_reason: bool | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
