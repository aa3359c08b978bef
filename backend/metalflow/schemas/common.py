"""Shared schema bases: camelCase JSON on the wire, snake_case in Python."""

from datetime import datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case input; serializes camelCase."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class EntityResponse(CamelModel):
    """Fields every reference-data record carries."""

    id: int
    enabled: bool
    created_at: datetime
    last_update: datetime
