"""
Shared pydantic base for the public wire format.

Field names are snake_case in Python and camelCase on the wire; both spellings
are accepted on input.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    success: bool = True
    message: str
