"""Operation Types CRUD API endpoints."""

from fastapi import APIRouter, Depends, Request, Response, status

from metalflow.api.deps import get_operation_type_service
from metalflow.models.operation_type import OperationType
from metalflow.schemas.operation_type import (
    OperationTypeCreate,
    OperationTypeResponse,
    OperationTypeUpdate,
)
from metalflow.services.operation_type_service import OperationTypeService

router = APIRouter(prefix="/operationtypes", tags=["operation-types"])


@router.get("", response_model=list[OperationTypeResponse])
async def list_operation_types(
    service: OperationTypeService = Depends(get_operation_type_service),
) -> list[OperationType]:
    return await service.get_enabled()


@router.get("/{operation_type_id}", response_model=OperationTypeResponse)
async def get_operation_type(
    operation_type_id: int,
    service: OperationTypeService = Depends(get_operation_type_service),
) -> OperationType:
    return await service.get_by_id(operation_type_id)


@router.post("", response_model=OperationTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_operation_type(
    payload: OperationTypeCreate,
    request: Request,
    response: Response,
    service: OperationTypeService = Depends(get_operation_type_service),
) -> OperationType:
    operation_type = await service.create(payload)
    response.headers["Location"] = str(
        request.url_for("get_operation_type", operation_type_id=operation_type.id)
    )
    return operation_type


@router.put("/{operation_type_id}", response_model=OperationTypeResponse)
async def update_operation_type(
    operation_type_id: int,
    payload: OperationTypeUpdate,
    service: OperationTypeService = Depends(get_operation_type_service),
) -> OperationType:
    return await service.update(operation_type_id, payload)


@router.delete("/{operation_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_operation_type(
    operation_type_id: int,
    service: OperationTypeService = Depends(get_operation_type_service),
) -> None:
    await service.delete(operation_type_id)
