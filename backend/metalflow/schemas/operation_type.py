"""OperationType Pydantic schemas."""

from pydantic import Field

from metalflow.schemas.common import CamelModel, EntityResponse


class OperationTypeCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)


OperationTypeUpdate = OperationTypeCreate


class OperationTypeResponse(EntityResponse):
    name: str
