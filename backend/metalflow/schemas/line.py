"""Line Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from metalflow.schemas.common import CamelModel, EntityResponse


class LineCreate(CamelModel):
    """Schema for creating or updating a line."""

    name: str = Field(..., min_length=1, max_length=100)
    work_center_ids: list[int] = Field(..., min_length=1)
    product_ids: list[int] | None = None


LineUpdate = LineCreate


class LineWorkCenterRouteResponse(CamelModel):
    id: int
    work_center_id: int
    work_center_name: str | None = None
    order: int
    version: int
    transport_time_in_minutes: int
    effective_start_date: datetime
    effective_end_date: datetime | None = None


class AvailableProductResponse(CamelModel):
    id: int
    product_id: int
    product_name: str | None = None


class LineResponse(EntityResponse):
    """Schema for line responses."""

    name: str
    work_center_routes: list[LineWorkCenterRouteResponse] = []
    available_products: list[AvailableProductResponse] = []
