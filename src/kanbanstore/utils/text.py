"""Utilities for cleaning user-supplied text."""

import re

_TAG_PATTERN = re.compile(r"<[^>]*>")


def strip_tags(text: str) -> str:
    """
    Remove HTML tags and surrounding whitespace from plain-text fields.

    Example: "<b>Fix</b> login " -> "Fix login"
    """
    return _TAG_PATTERN.sub("", text).strip()


def clean_plain_text(value: object) -> object:
    """Pydantic ``mode="before"`` hook: strip tags from strings, pass others through."""
    if isinstance(value, str):
        return strip_tags(value)
    return value
