"""Product Pydantic schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from metalflow.schemas.common import CamelModel, EntityResponse


class ProductCreate(CamelModel):
    """Schema for creating or updating a product."""

    name: str = Field(..., min_length=1, max_length=100)
    unit_price_per_ton: Decimal = Field(..., ge=Decimal("0.01"), max_digits=18, decimal_places=2)
    profit_margin: Decimal = Field(..., ge=0, max_digits=18, decimal_places=4)
    priority: int = Field(..., ge=1)
    penalty_cost: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)
    operation_type_ids: list[int] | None = None


ProductUpdate = ProductCreate


class ProductOperationRouteResponse(CamelModel):
    id: int
    operation_type_id: int
    operation_type_name: str | None = None
    order: int
    version: int
    effective_start_date: datetime
    effective_end_date: datetime | None = None


class ProductResponse(EntityResponse):
    """Schema for product responses."""

    name: str
    unit_price_per_ton: float
    profit_margin: float
    priority: int
    penalty_cost: float
    operation_routes: list[ProductOperationRouteResponse] = []
