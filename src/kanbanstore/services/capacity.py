"""WIP capacity decisions.

Pure functions: callers pass the column and an occupancy they counted inside
the same transaction that will insert or move the task.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..errors import ColumnCapacityFullError

DEFAULT_NEAR_CAPACITY_RATIO = 0.8


class HasWipLimit(Protocol):
    name: str
    wip_limit: int


@dataclass(frozen=True)
class Admission:
    """Outcome of a capacity check."""

    allowed: bool
    reason: str | None = None


def is_at_capacity(wip_limit: int, count: int) -> bool:
    """Whether a column with ``count`` tasks is full. A limit of 0 is unlimited."""
    return wip_limit > 0 and count >= wip_limit


def is_near_capacity(
    wip_limit: int, count: int, ratio: float = DEFAULT_NEAR_CAPACITY_RATIO
) -> bool:
    return wip_limit > 0 and count >= ratio * wip_limit


def available_capacity(wip_limit: int, count: int) -> int | None:
    """Remaining slots, or None for an unlimited column."""
    if wip_limit <= 0:
        return None
    return max(wip_limit - count, 0)


def admit(column: HasWipLimit, occupancy: int) -> Admission:
    """Decide whether one more task may enter ``column``."""
    if is_at_capacity(column.wip_limit, occupancy):
        return Admission(
            allowed=False,
            reason=f"Column '{column.name}' is at capacity ({occupancy}/{column.wip_limit})",
        )
    return Admission(allowed=True)


def ensure_capacity(column: HasWipLimit, occupancy: int) -> None:
    """Raise ColumnCapacityFullError if ``column`` cannot take another task."""
    if not admit(column, occupancy).allowed:
        raise ColumnCapacityFullError(column.name, occupancy, column.wip_limit)
