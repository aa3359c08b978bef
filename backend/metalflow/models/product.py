"""Product SQLAlchemy model."""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Index, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from metalflow.models.base import BaseEntity

if TYPE_CHECKING:
    from metalflow.models.routes import ProductOperationRoute


class Product(BaseEntity):
    """Sellable product with its commercial parameters and operation route."""

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    unit_price_per_ton: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    profit_margin: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False)
    penalty_cost: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, comment="Cost per day of late delivery"
    )

    operation_routes: Mapped[list["ProductOperationRoute"]] = relationship(
        cascade="all, delete-orphan",
        order_by="ProductOperationRoute.order",
        lazy="raise",
    )


Index(
    "ux_products_name_enabled",
    func.lower(Product.name),
    unique=True,
    postgresql_where=Product.enabled,
)
