"""Shared utilities."""

from .datetime import as_utc, now_utc, to_iso
from .text import clean_plain_text, strip_tags

__all__ = [
    "as_utc",
    "clean_plain_text",
    "now_utc",
    "strip_tags",
    "to_iso",
]
