"""Base models for API serialization."""

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel


class CamelCaseModel(BaseModel):
    """Base model for wire payloads using camelCase JSON serialization."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Dump using camelCase aliases, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
