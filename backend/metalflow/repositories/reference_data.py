"""Repositories for the reference-data entities."""

from sqlalchemy.orm import selectinload

from metalflow.models.line import Line
from metalflow.models.operation import Operation
from metalflow.models.operation_type import OperationType
from metalflow.models.product import Product
from metalflow.models.routes import (
    LineWorkCenterRoute,
    ProductAvailablePerLine,
    ProductOperationRoute,
    WorkCenterOperationRoute,
)
from metalflow.models.work_center import WorkCenter
from metalflow.repositories.base import Repository


class LineRepository(Repository[Line]):
    model = Line
    detail_options = (
        selectinload(Line.work_center_routes).selectinload(LineWorkCenterRoute.work_center),
        selectinload(Line.available_products).selectinload(ProductAvailablePerLine.product),
    )


class WorkCenterRepository(Repository[WorkCenter]):
    model = WorkCenter
    detail_options = (
        selectinload(WorkCenter.line),
        selectinload(WorkCenter.operation_routes).selectinload(
            WorkCenterOperationRoute.operation_type
        ),
    )


class ProductRepository(Repository[Product]):
    model = Product
    detail_options = (
        selectinload(Product.operation_routes).selectinload(
            ProductOperationRoute.operation_type
        ),
    )


class OperationTypeRepository(Repository[OperationType]):
    model = OperationType


class OperationRepository(Repository[Operation]):
    model = Operation
    detail_options = (
        selectinload(Operation.operation_type),
        selectinload(Operation.work_center),
    )
