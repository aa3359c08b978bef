"""Operation Pydantic schemas."""

from pydantic import Field

from metalflow.schemas.common import CamelModel, EntityResponse


class OperationCreate(CamelModel):
    """Schema for creating or updating an operation."""

    name: str = Field(..., min_length=1, max_length=100)
    setup_time_in_minutes: float = Field(..., ge=0)
    capacity: float = Field(..., ge=0.01, description="Tons per hour")
    operation_type_id: int = Field(..., ge=1)
    work_center_id: int = Field(..., ge=1)


OperationUpdate = OperationCreate


class OperationResponse(EntityResponse):
    """Schema for operation responses."""

    name: str
    setup_time_in_minutes: float
    capacity: float
    operation_type_id: int
    operation_type_name: str | None = None
    work_center_id: int
    work_center_name: str | None = None
