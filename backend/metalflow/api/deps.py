"""Service factories for FastAPI dependency injection.

Each request gets its own session, repositories and services.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from metalflow.core.database import get_db
from metalflow.repositories import (
    LineRepository,
    OperationRepository,
    OperationTypeRepository,
    ProductRepository,
    WorkCenterRepository,
)
from metalflow.services.auth_service import AuthService
from metalflow.services.line_service import LineService
from metalflow.services.operation_service import OperationService
from metalflow.services.operation_type_service import OperationTypeService
from metalflow.services.product_service import ProductService
from metalflow.services.user_store import UserStore
from metalflow.services.work_center_service import WorkCenterService


def get_line_service(db: AsyncSession = Depends(get_db)) -> LineService:
    return LineService(LineRepository(db), WorkCenterRepository(db), ProductRepository(db))


def get_work_center_service(db: AsyncSession = Depends(get_db)) -> WorkCenterService:
    return WorkCenterService(
        WorkCenterRepository(db), LineRepository(db), OperationTypeRepository(db)
    )


def get_product_service(db: AsyncSession = Depends(get_db)) -> ProductService:
    return ProductService(ProductRepository(db), OperationTypeRepository(db))


def get_operation_type_service(db: AsyncSession = Depends(get_db)) -> OperationTypeService:
    return OperationTypeService(OperationTypeRepository(db))


def get_operation_service(db: AsyncSession = Depends(get_db)) -> OperationService:
    return OperationService(
        OperationRepository(db), OperationTypeRepository(db), WorkCenterRepository(db)
    )


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(UserStore(db))
