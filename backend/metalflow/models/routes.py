"""Route association models.

A route links one owner (Line, WorkCenter or Product) to one target
(WorkCenter or OperationType) with a position in the owner's sequence,
a version and an effective date range. ``ProductAvailablePerLine`` is a
plain membership link without ordering.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from metalflow.models.base import BaseEntity

if TYPE_CHECKING:
    from metalflow.models.operation_type import OperationType
    from metalflow.models.product import Product
    from metalflow.models.work_center import WorkCenter


class LineWorkCenterRoute(BaseEntity):
    """Position of a work center within a line."""

    __tablename__ = "line_work_center_routes"

    line_id: Mapped[int] = mapped_column(
        ForeignKey("lines.id", ondelete="CASCADE"), nullable=False, index=True
    )
    work_center_id: Mapped[int] = mapped_column(
        ForeignKey("work_centers.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    order: Mapped[int] = mapped_column("order", Integer, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")
    transport_time_in_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    effective_start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    effective_end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    work_center: Mapped["WorkCenter"] = relationship(lazy="raise")

    @property
    def work_center_name(self) -> str | None:
        return self.work_center.name if self.work_center is not None else None


class WorkCenterOperationRoute(BaseEntity):
    """Position of an operation type within a work center."""

    __tablename__ = "work_center_operation_routes"

    work_center_id: Mapped[int] = mapped_column(
        ForeignKey("work_centers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    operation_type_id: Mapped[int] = mapped_column(
        ForeignKey("operation_types.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    order: Mapped[int] = mapped_column("order", Integer, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")
    transport_time_in_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    effective_start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    effective_end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    operation_type: Mapped["OperationType"] = relationship(lazy="raise")

    @property
    def operation_type_name(self) -> str | None:
        return self.operation_type.name if self.operation_type is not None else None


class ProductOperationRoute(BaseEntity):
    """Position of an operation type within a product's processing route."""

    __tablename__ = "product_operation_routes"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    operation_type_id: Mapped[int] = mapped_column(
        ForeignKey("operation_types.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    order: Mapped[int] = mapped_column("order", Integer, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")
    effective_start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    effective_end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    operation_type: Mapped["OperationType"] = relationship(lazy="raise")

    @property
    def operation_type_name(self) -> str | None:
        return self.operation_type.name if self.operation_type is not None else None


class ProductAvailablePerLine(BaseEntity):
    """A product that may be produced on a line."""

    __tablename__ = "product_available_per_line"
    __table_args__ = (
        UniqueConstraint("product_id", "line_id", name="uq_product_available_per_line"),
    )

    line_id: Mapped[int] = mapped_column(
        ForeignKey("lines.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    product: Mapped["Product"] = relationship(lazy="raise")

    @property
    def product_name(self) -> str | None:
        return self.product.name if self.product is not None else None
