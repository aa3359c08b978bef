"""Entity stores."""

from metalflow.repositories.base import Repository
from metalflow.repositories.reference_data import (
    LineRepository,
    OperationRepository,
    OperationTypeRepository,
    ProductRepository,
    WorkCenterRepository,
)

__all__ = [
    "LineRepository",
    "OperationRepository",
    "OperationTypeRepository",
    "ProductRepository",
    "Repository",
    "WorkCenterRepository",
]
