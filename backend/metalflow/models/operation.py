"""Operation SQLAlchemy model."""

from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from metalflow.models.base import BaseEntity

if TYPE_CHECKING:
    from metalflow.models.operation_type import OperationType
    from metalflow.models.work_center import WorkCenter


class Operation(BaseEntity):
    """Concrete operation of a given type performed at a work center."""

    __tablename__ = "operations"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    setup_time_in_minutes: Mapped[float] = mapped_column(Float, nullable=False)
    capacity: Mapped[float] = mapped_column(
        Float, nullable=False, comment="Capacity in tons per hour"
    )
    operation_type_id: Mapped[int] = mapped_column(
        ForeignKey("operation_types.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    work_center_id: Mapped[int] = mapped_column(
        ForeignKey("work_centers.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    operation_type: Mapped["OperationType"] = relationship(lazy="raise")
    work_center: Mapped["WorkCenter"] = relationship(lazy="raise")

    @property
    def operation_type_name(self) -> str | None:
        return self.operation_type.name if self.operation_type is not None else None

    @property
    def work_center_name(self) -> str | None:
        return self.work_center.name if self.work_center is not None else None


Index(
    "ux_operations_name_enabled",
    func.lower(Operation.name),
    unique=True,
    postgresql_where=Operation.enabled,
)
