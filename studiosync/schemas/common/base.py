"""
Base schema classes with common fields and configurations.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

__all__ = [
    "BaseSchema",
    "FrozenSchema",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    Documents in the store use PascalCase keys; schemas expose snake_case
    attributes and map them through field aliases, so both spellings are
    accepted on input.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        # Keep enums as Enum instances to retain full type information;
        # callers can still access `.value` if needed.
        use_enum_values=False,
        arbitrary_types_allowed=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="ignore",
    )


class FrozenSchema(BaseSchema):
    """Immutable, hashable schema for value objects and definitions."""

    model_config = ConfigDict(frozen=True, validate_assignment=False)
