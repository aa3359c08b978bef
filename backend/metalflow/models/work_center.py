"""WorkCenter SQLAlchemy model."""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from metalflow.models.base import BaseEntity

if TYPE_CHECKING:
    from metalflow.models.line import Line
    from metalflow.models.routes import WorkCenterOperationRoute


class WorkCenter(BaseEntity):
    """Work center belonging to a line, performing an ordered set of operation types."""

    __tablename__ = "work_centers"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    optimal_batch: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, comment="Optimal batch size in tons"
    )
    line_id: Mapped[int] = mapped_column(
        ForeignKey("lines.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    line: Mapped["Line"] = relationship(lazy="raise")
    operation_routes: Mapped[list["WorkCenterOperationRoute"]] = relationship(
        cascade="all, delete-orphan",
        order_by="WorkCenterOperationRoute.order",
        lazy="raise",
    )

    @property
    def line_name(self) -> str | None:
        return self.line.name if self.line is not None else None


Index(
    "ux_work_centers_name_enabled",
    func.lower(WorkCenter.name),
    unique=True,
    postgresql_where=WorkCenter.enabled,
)
