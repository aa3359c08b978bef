"""Pydantic v2 schemas for request/response validation."""

from metalflow.schemas.auth import (
    AssignRoleRequest,
    ClaimItem,
    ClaimRequest,
    ClaimResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    UpdateUserPermissionsRequest,
)
from metalflow.schemas.line import LineCreate, LineResponse, LineUpdate
from metalflow.schemas.operation import OperationCreate, OperationResponse, OperationUpdate
from metalflow.schemas.operation_type import (
    OperationTypeCreate,
    OperationTypeResponse,
    OperationTypeUpdate,
)
from metalflow.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from metalflow.schemas.work_center import WorkCenterCreate, WorkCenterResponse, WorkCenterUpdate

__all__ = [
    "AssignRoleRequest",
    "ClaimItem",
    "ClaimRequest",
    "ClaimResponse",
    "LineCreate",
    "LineResponse",
    "LineUpdate",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "OperationCreate",
    "OperationResponse",
    "OperationTypeCreate",
    "OperationTypeResponse",
    "OperationTypeUpdate",
    "OperationUpdate",
    "ProductCreate",
    "ProductResponse",
    "ProductUpdate",
    "RegisterRequest",
    "UpdateUserPermissionsRequest",
    "WorkCenterCreate",
    "WorkCenterResponse",
    "WorkCenterUpdate",
]
