"""Conversion of pydantic input validation into engine errors."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def format_errors(error: PydanticValidationError) -> str:
    """Render field errors as ``field: message; ...``."""
    parts = []
    for item in error.errors(include_url=False):
        location = ".".join(str(part) for part in item["loc"]) or "input"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def parse_input(model: type[M], **data: Any) -> M:
    """Validate operation arguments into ``model``.

    Raises:
        ValidationError: with the pydantic field messages preserved
    """
    try:
        return model(**data)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid {model.__name__}: {format_errors(e)}",
            errors=e.errors(include_url=False, include_context=False),
        ) from e
