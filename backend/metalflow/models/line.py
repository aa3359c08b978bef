"""Line SQLAlchemy model."""

from typing import TYPE_CHECKING

from sqlalchemy import Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from metalflow.models.base import BaseEntity

if TYPE_CHECKING:
    from metalflow.models.routes import LineWorkCenterRoute, ProductAvailablePerLine


class Line(BaseEntity):
    """Production line: an ordered path through work centers."""

    __tablename__ = "lines"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    work_center_routes: Mapped[list["LineWorkCenterRoute"]] = relationship(
        cascade="all, delete-orphan",
        order_by="LineWorkCenterRoute.order",
        lazy="raise",
    )
    available_products: Mapped[list["ProductAvailablePerLine"]] = relationship(
        cascade="all, delete-orphan",
        lazy="raise",
    )


Index(
    "ux_lines_name_enabled",
    func.lower(Line.name),
    unique=True,
    postgresql_where=Line.enabled,
)
