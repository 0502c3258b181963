from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """
    Base for request and response bodies.

    JSON keys are camelCase; snake_case field names are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StrictAPIModel(APIModel):
    """APIModel that rejects unknown keys (stored configuration blobs)."""

    model_config = ConfigDict(extra="forbid")


class Pagination(APIModel):
    total: int
    limit: int
    offset: int


class MessageResponse(APIModel):
    message: str


class BusinessTypeSummary(APIModel):
    """Business type reference embedded in other responses"""

    id: str
    name: str
    display_name: str
