"""Shared configuration for API DTOs."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    camelCase on the wire, snake_case in Python.

    Accepts either spelling on input; FastAPI serializes response models
    by alias, so responses always use camelCase.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
