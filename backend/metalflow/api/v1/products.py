"""Products CRUD API endpoints."""

from fastapi import APIRouter, Depends, Request, Response, status

from metalflow.api.deps import get_product_service
from metalflow.models.product import Product
from metalflow.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from metalflow.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductResponse])
async def list_products(
    service: ProductService = Depends(get_product_service),
) -> list[Product]:
    """List enabled products with their operation routes."""
    return await service.get_enabled()


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> Product:
    return await service.get_by_id(product_id)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    request: Request,
    response: Response,
    service: ProductService = Depends(get_product_service),
) -> Product:
    product = await service.create(payload)
    response.headers["Location"] = str(request.url_for("get_product", product_id=product.id))
    return product


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> Product:
    return await service.update(product_id, payload)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> None:
    await service.delete(product_id)
