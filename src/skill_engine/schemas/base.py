"""Common schema utilities and base classes."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SchemaBase(BaseModel):
    """Base model for wire-level Skill Engine schemas.

    Fields are declared in snake_case and serialized in camelCase. Instances
    are frozen: a state transition always produces a new value.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict using wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        return cls.model_validate(data)

    def json_schema(self) -> Dict[str, Any]:
        """Return the JSON schema for this model class."""
        return self.model_json_schema(by_alias=True)  # pragma: no cover
