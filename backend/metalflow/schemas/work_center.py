"""WorkCenter Pydantic schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from metalflow.schemas.common import CamelModel, EntityResponse


class WorkCenterCreate(CamelModel):
    """Schema for creating or updating a work center."""

    name: str = Field(..., min_length=1, max_length=100)
    optimal_batch: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    line_id: int = Field(..., ge=1)
    operation_type_ids: list[int] = Field(..., min_length=1)


WorkCenterUpdate = WorkCenterCreate


class WorkCenterOperationRouteResponse(CamelModel):
    id: int
    operation_type_id: int
    operation_type_name: str | None = None
    name: str | None = None
    order: int
    version: int
    transport_time_in_minutes: int
    effective_start_date: datetime
    effective_end_date: datetime | None = None


class WorkCenterResponse(EntityResponse):
    """Schema for work center responses."""

    name: str
    optimal_batch: float
    line_id: int
    line_name: str | None = None
    operation_routes: list[WorkCenterOperationRouteResponse] = []
