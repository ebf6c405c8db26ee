"""
Shared Pydantic configuration for API schemas.
"""
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Reads ORM objects directly and serializes enums by value."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
    )
