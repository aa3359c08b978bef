"""Lines CRUD API endpoints."""

from fastapi import APIRouter, Depends, Request, Response, status

from metalflow.api.deps import get_line_service
from metalflow.models.line import Line
from metalflow.schemas.line import LineCreate, LineResponse, LineUpdate
from metalflow.services.line_service import LineService

router = APIRouter(prefix="/lines", tags=["lines"])


@router.get("", response_model=list[LineResponse])
async def list_lines(service: LineService = Depends(get_line_service)) -> list[Line]:
    """List enabled lines with their work-center routes and products."""
    return await service.get_enabled()


@router.get("/{line_id}", response_model=LineResponse)
async def get_line(line_id: int, service: LineService = Depends(get_line_service)) -> Line:
    """Get a single enabled line by ID."""
    return await service.get_by_id(line_id)


@router.post("", response_model=LineResponse, status_code=status.HTTP_201_CREATED)
async def create_line(
    payload: LineCreate,
    request: Request,
    response: Response,
    service: LineService = Depends(get_line_service),
) -> Line:
    """Create a line, or reactivate a deleted one with the same name."""
    line = await service.create(payload)
    response.headers["Location"] = str(request.url_for("get_line", line_id=line.id))
    return line


@router.put("/{line_id}", response_model=LineResponse)
async def update_line(
    line_id: int,
    payload: LineUpdate,
    service: LineService = Depends(get_line_service),
) -> Line:
    """Update a line and reconcile its routes."""
    return await service.update(line_id, payload)


@router.delete("/{line_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_line(line_id: int, service: LineService = Depends(get_line_service)) -> None:
    """Soft-delete a line."""
    await service.delete(line_id)
