"""API v1 router aggregating all sub-routers."""

from fastapi import APIRouter

from metalflow.api.v1.auth import router as auth_router
from metalflow.api.v1.lines import router as lines_router
from metalflow.api.v1.operation_types import router as operation_types_router
from metalflow.api.v1.operations import router as operations_router
from metalflow.api.v1.products import router as products_router
from metalflow.api.v1.work_centers import router as work_centers_router

api_v1_router = APIRouter()


@api_v1_router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint returning 200 OK."""
    return {"status": "ok"}


# Reference-data endpoints are open; auth endpoints apply their own policies.
api_v1_router.include_router(lines_router)
api_v1_router.include_router(work_centers_router)
api_v1_router.include_router(products_router)
api_v1_router.include_router(operations_router)
api_v1_router.include_router(operation_types_router)
api_v1_router.include_router(auth_router)
