"""Operations CRUD API endpoints."""

from fastapi import APIRouter, Depends, Request, Response, status

from metalflow.api.deps import get_operation_service
from metalflow.models.operation import Operation
from metalflow.schemas.operation import OperationCreate, OperationResponse, OperationUpdate
from metalflow.services.operation_service import OperationService

router = APIRouter(prefix="/operations", tags=["operations"])


@router.get("", response_model=list[OperationResponse])
async def list_operations(
    service: OperationService = Depends(get_operation_service),
) -> list[Operation]:
    """List enabled operations with operation type and work center names."""
    return await service.get_enabled()


@router.get("/{operation_id}", response_model=OperationResponse)
async def get_operation(
    operation_id: int,
    service: OperationService = Depends(get_operation_service),
) -> Operation:
    return await service.get_by_id(operation_id)


@router.post("", response_model=OperationResponse, status_code=status.HTTP_201_CREATED)
async def create_operation(
    payload: OperationCreate,
    request: Request,
    response: Response,
    service: OperationService = Depends(get_operation_service),
) -> Operation:
    operation = await service.create(payload)
    response.headers["Location"] = str(
        request.url_for("get_operation", operation_id=operation.id)
    )
    return operation


@router.put("/{operation_id}", response_model=OperationResponse)
async def update_operation(
    operation_id: int,
    payload: OperationUpdate,
    service: OperationService = Depends(get_operation_service),
) -> Operation:
    return await service.update(operation_id, payload)


@router.delete("/{operation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_operation(
    operation_id: int,
    service: OperationService = Depends(get_operation_service),
) -> None:
    await service.delete(operation_id)
