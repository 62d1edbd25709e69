"""
Common model base classes.

CamelModel gives every wire-facing model camelCase JSON keys while
keeping snake_case attribute names in Python.

Dependencies: pydantic
System role: Shared API and wire-format structures
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Convert to a JSON-serializable dictionary with wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
