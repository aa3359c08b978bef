"""SQLAlchemy ORM models."""

from metalflow.models.identity import Role, User, UserClaim, user_roles
from metalflow.models.line import Line
from metalflow.models.operation import Operation
from metalflow.models.operation_type import OperationType
from metalflow.models.product import Product
from metalflow.models.production_order import ProductionOrder, ProductionOrderItem
from metalflow.models.routes import (
    LineWorkCenterRoute,
    ProductAvailablePerLine,
    ProductOperationRoute,
    WorkCenterOperationRoute,
)
from metalflow.models.surplus import SurplusPerProductAndWorkCenter
from metalflow.models.work_center import WorkCenter

__all__ = [
    "Line",
    "LineWorkCenterRoute",
    "Operation",
    "OperationType",
    "Product",
    "ProductAvailablePerLine",
    "ProductOperationRoute",
    "ProductionOrder",
    "ProductionOrderItem",
    "Role",
    "SurplusPerProductAndWorkCenter",
    "User",
    "UserClaim",
    "WorkCenter",
    "WorkCenterOperationRoute",
    "user_roles",
]
