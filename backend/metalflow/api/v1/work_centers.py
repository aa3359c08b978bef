"""Work Centers CRUD API endpoints."""

from fastapi import APIRouter, Depends, Request, Response, status

from metalflow.api.deps import get_work_center_service
from metalflow.models.work_center import WorkCenter
from metalflow.schemas.work_center import WorkCenterCreate, WorkCenterResponse, WorkCenterUpdate
from metalflow.services.work_center_service import WorkCenterService

router = APIRouter(prefix="/workcenters", tags=["work-centers"])


@router.get("", response_model=list[WorkCenterResponse])
async def list_work_centers(
    service: WorkCenterService = Depends(get_work_center_service),
) -> list[WorkCenter]:
    """List enabled work centers with line name and operation routes."""
    return await service.get_enabled()


@router.get("/{work_center_id}", response_model=WorkCenterResponse)
async def get_work_center(
    work_center_id: int,
    service: WorkCenterService = Depends(get_work_center_service),
) -> WorkCenter:
    return await service.get_by_id(work_center_id)


@router.post("", response_model=WorkCenterResponse, status_code=status.HTTP_201_CREATED)
async def create_work_center(
    payload: WorkCenterCreate,
    request: Request,
    response: Response,
    service: WorkCenterService = Depends(get_work_center_service),
) -> WorkCenter:
    work_center = await service.create(payload)
    response.headers["Location"] = str(
        request.url_for("get_work_center", work_center_id=work_center.id)
    )
    return work_center


@router.put("/{work_center_id}", response_model=WorkCenterResponse)
async def update_work_center(
    work_center_id: int,
    payload: WorkCenterUpdate,
    service: WorkCenterService = Depends(get_work_center_service),
) -> WorkCenter:
    return await service.update(work_center_id, payload)


@router.delete("/{work_center_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_work_center(
    work_center_id: int,
    service: WorkCenterService = Depends(get_work_center_service),
) -> None:
    await service.delete(work_center_id)
