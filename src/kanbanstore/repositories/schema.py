"""SQLAlchemy table definitions for boards, columns and tasks.

Foreign keys are declared without ON DELETE CASCADE; board deletion removes
tasks, then columns, then the board explicitly inside one transaction.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

SCHEMA_VERSION = 3


def new_id() -> str:
    """Generate an opaque entity id."""
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator):
    """Stores naive UTC, returns aware UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=UTC)


class Base(DeclarativeBase):
    pass


class BoardRecord(Base):
    __tablename__ = "boards"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    goal: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # No FK: boards and columns reference each other. Same-board membership is
    # checked by the services and by import.
    landing_column_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    columns: Mapped[list[ColumnRecord]] = relationship(
        back_populates="board", order_by="ColumnRecord.position"
    )

    def __repr__(self) -> str:
        return f"BoardRecord(id={self.id!r}, name={self.name!r})"


class ColumnRecord(Base):
    __tablename__ = "columns"
    __table_args__ = (UniqueConstraint("board_id", "position", name="uq_columns_board_position"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    board_id: Mapped[str] = mapped_column(ForeignKey("boards.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    wip_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_done_column: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    board: Mapped[BoardRecord] = relationship(back_populates="columns")
    tasks: Mapped[list[TaskRecord]] = relationship(
        back_populates="column", order_by="TaskRecord.position"
    )

    def __repr__(self) -> str:
        return f"ColumnRecord(id={self.id!r}, name={self.name!r}, position={self.position})"


class TaskRecord(Base):
    __tablename__ = "tasks"
    # Positions are shifted in bulk while moving, so (column_id, position) is
    # indexed but not unique.
    __table_args__ = (Index("ix_tasks_column_position", "column_id", "position"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    column_id: Mapped[str] = mapped_column(ForeignKey("columns.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    update_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # "metadata" is reserved on declarative classes
    task_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON(none_as_null=True), nullable=True
    )

    column: Mapped[ColumnRecord] = relationship(back_populates="tasks")

    def __repr__(self) -> str:
        return (
            f"TaskRecord(id={self.id!r}, column_id={self.column_id!r}, "
            f"position={self.position})"
        )


class DatabaseInfoRecord(Base):
    """Single-row bookkeeping table; not part of export."""

    __tablename__ = "database_info"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False)
    last_migration: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
