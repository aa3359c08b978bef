"""ProductionOrder and ProductionOrderItem SQLAlchemy models."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from metalflow.models.base import BaseEntity


class ProductionOrder(BaseEntity):
    """Customer demand to be produced between two dates."""

    __tablename__ = "production_orders"

    order_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    earliest_start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    items: Mapped[list["ProductionOrderItem"]] = relationship(
        back_populates="production_order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ProductionOrderItem(BaseEntity):
    """Quantity of one product within a production order."""

    __tablename__ = "production_order_items"

    production_order_id: Mapped[int] = mapped_column(
        ForeignKey("production_orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, comment="Quantity in tons"
    )

    production_order: Mapped["ProductionOrder"] = relationship(back_populates="items")
