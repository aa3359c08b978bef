"""Product service: operation-type route reconciliation."""

from metalflow.models.product import Product
from metalflow.repositories.reference_data import OperationTypeRepository, ProductRepository
from metalflow.schemas.product import ProductCreate
from metalflow.services.reference_data import ReferenceDataService
from metalflow.services.route_reconciliation import PRODUCT_OPERATION_TYPES


class ProductService(ReferenceDataService[Product]):
    label = "Product"
    route_collections = ((PRODUCT_OPERATION_TYPES, "operation_type_ids"),)

    def __init__(
        self,
        products: ProductRepository,
        operation_types: OperationTypeRepository,
    ) -> None:
        super().__init__(products)
        self.operation_types = operation_types

    async def _validate_references(self, payload: ProductCreate) -> None:
        await self._require_enabled(
            self.operation_types,
            payload.operation_type_ids,
            "operationTypeIds",
            "Operation type",
            required=False,
        )

    def _apply(self, entity: Product, payload: ProductCreate) -> None:
        entity.name = payload.name
        entity.unit_price_per_ton = payload.unit_price_per_ton
        entity.profit_margin = payload.profit_margin
        entity.priority = payload.priority
        entity.penalty_cost = payload.penalty_cost
