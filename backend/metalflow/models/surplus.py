"""SurplusPerProductAndWorkCenter SQLAlchemy model."""

from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from metalflow.models.base import BaseEntity


class SurplusPerProductAndWorkCenter(BaseEntity):
    """Extra quantity a work center processes for a product to absorb losses."""

    __tablename__ = "surplus_per_product_and_work_center"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    work_center_id: Mapped[int] = mapped_column(
        ForeignKey("work_centers.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    surplus: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
