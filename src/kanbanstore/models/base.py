"""Shared pydantic configuration for domain models."""

from typing import Annotated

from pydantic import AliasGenerator, BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from ..utils import clean_plain_text

# Plain-text fields (names, titles) have markup and surrounding whitespace removed
PlainText = Annotated[str, BeforeValidator(clean_plain_text)]
OptionalPlainText = PlainText | None


class DomainModel(BaseModel):
    """Base for models returned to callers.

    Attributes are snake_case; ``model_dump(by_alias=True)`` yields the
    camelCase shape API consumers expect (``landingColumnId``, ``isAtCapacity``).
    """

    model_config = ConfigDict(
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


class InputModel(BaseModel):
    """Base for validated operation inputs; unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    def changes(self) -> dict:
        """Fields explicitly provided by the caller."""
        return {name: getattr(self, name) for name in self.model_fields_set}
