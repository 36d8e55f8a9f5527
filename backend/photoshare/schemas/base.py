"""Base schema configuration."""

from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    """Base model with ORM compatibility; ``_id`` fields are declared by alias."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class MessageResponse(ApiModel):
    message: str
