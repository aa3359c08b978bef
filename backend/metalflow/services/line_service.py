"""Line service: work-center route and available-product reconciliation."""

from metalflow.models.line import Line
from metalflow.repositories.reference_data import (
    LineRepository,
    ProductRepository,
    WorkCenterRepository,
)
from metalflow.schemas.line import LineCreate
from metalflow.services.reference_data import ReferenceDataService
from metalflow.services.route_reconciliation import LINE_PRODUCTS, LINE_WORK_CENTERS


class LineService(ReferenceDataService[Line]):
    label = "Line"
    route_collections = (
        (LINE_WORK_CENTERS, "work_center_ids"),
        (LINE_PRODUCTS, "product_ids"),
    )

    def __init__(
        self,
        lines: LineRepository,
        work_centers: WorkCenterRepository,
        products: ProductRepository,
    ) -> None:
        super().__init__(lines)
        self.work_centers = work_centers
        self.products = products

    async def _validate_references(self, payload: LineCreate) -> None:
        await self._require_enabled(
            self.work_centers, payload.work_center_ids, "workCenterIds", "Work center"
        )
        await self._require_enabled(
            self.products, payload.product_ids, "productIds", "Product", required=False
        )

    def _apply(self, entity: Line, payload: LineCreate) -> None:
        entity.name = payload.name
