"""Tests for ProductService."""

from decimal import Decimal

import pytest

from metalflow.core.exceptions import ConflictError, ValidationError
from metalflow.models.operation_type import OperationType
from metalflow.models.product import Product
from metalflow.schemas.product import ProductCreate
from metalflow.services.product_service import ProductService
from tests.conftest import make_repository, product_route


def _payload(**overrides) -> ProductCreate:
    data = {
        "name": "Galvanized Coil",
        "unit_price_per_ton": Decimal("910.00"),
        "profit_margin": Decimal("0.1200"),
        "priority": 2,
        "penalty_cost": Decimal("75.00"),
    }
    data.update(overrides)
    return ProductCreate(**data)


@pytest.fixture
def operation_types(operation_type_factory):
    return make_repository(OperationType, *(operation_type_factory.create() for _ in range(3)))


class TestProductService:
    @pytest.mark.asyncio
    async def test_create_without_routes(self, operation_types):
        service = ProductService(make_repository(Product), operation_types)

        product = await service.create(_payload())

        assert product.unit_price_per_ton == Decimal("910.00")
        assert product.priority == 2
        assert product.operation_routes == []
        operation_types.find_enabled_ids.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_with_routes(self, operation_types):
        service = ProductService(make_repository(Product), operation_types)

        product = await service.create(_payload(operation_type_ids=[3, 1, 3]))

        assert [(r.operation_type_id, r.order) for r in product.operation_routes] == [
            (3, 1),
            (1, 2),
        ]
        assert all(r.version == 1 for r in product.operation_routes)

    @pytest.mark.asyncio
    async def test_update_without_ids_clears_routes(self, product_factory, operation_types):
        product = product_factory.create(operation_routes=[product_route(1, 1)])
        service = ProductService(make_repository(Product, product), operation_types)

        updated = await service.update(product.id, _payload(name=product.name))

        assert updated.operation_routes == []

    @pytest.mark.asyncio
    async def test_disabled_operation_type_is_rejected(self, operation_type_factory):
        disabled = operation_type_factory.create(enabled=False)
        service = ProductService(
            make_repository(Product), make_repository(OperationType, disabled)
        )

        with pytest.raises(ValidationError) as exc_info:
            await service.create(_payload(operation_type_ids=[disabled.id]))

        assert "operationTypeIds" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, product_factory, operation_types):
        existing = product_factory.create(name="Galvanized Coil")
        service = ProductService(make_repository(Product, existing), operation_types)

        with pytest.raises(ConflictError):
            await service.create(_payload(name="GALVANIZED COIL"))
