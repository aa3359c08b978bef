"""OperationType SQLAlchemy model."""

from sqlalchemy import Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from metalflow.models.base import BaseEntity


class OperationType(BaseEntity):
    """Kind of processing step (cutting, rolling, annealing, ...)."""

    __tablename__ = "operation_types"

    name: Mapped[str] = mapped_column(String(100), nullable=False)


Index(
    "ux_operation_types_name_enabled",
    func.lower(OperationType.name),
    unique=True,
    postgresql_where=OperationType.enabled,
)
