"""Utilities for datetime handling.

All timestamps handled by the engine are timezone-aware UTC. The database
layer stores them naive and re-attaches UTC on read.
"""

from datetime import UTC, datetime


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def as_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime (naive values are taken as UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_iso(dt: datetime) -> str:
    """Convert datetime to ISO format string."""
    return as_utc(dt).isoformat()
