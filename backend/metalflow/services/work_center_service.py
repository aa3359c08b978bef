"""WorkCenter service: parent line check and operation-type route reconciliation."""

from metalflow.models.work_center import WorkCenter
from metalflow.repositories.reference_data import (
    LineRepository,
    OperationTypeRepository,
    WorkCenterRepository,
)
from metalflow.schemas.work_center import WorkCenterCreate
from metalflow.services.reference_data import ReferenceDataService
from metalflow.services.route_reconciliation import WORK_CENTER_OPERATION_TYPES


class WorkCenterService(ReferenceDataService[WorkCenter]):
    label = "Work center"
    route_collections = ((WORK_CENTER_OPERATION_TYPES, "operation_type_ids"),)

    def __init__(
        self,
        work_centers: WorkCenterRepository,
        lines: LineRepository,
        operation_types: OperationTypeRepository,
    ) -> None:
        super().__init__(work_centers)
        self.lines = lines
        self.operation_types = operation_types

    async def _validate_references(self, payload: WorkCenterCreate) -> None:
        await self._require_enabled(self.lines, [payload.line_id], "lineId", "Line")
        await self._require_enabled(
            self.operation_types,
            payload.operation_type_ids,
            "operationTypeIds",
            "Operation type",
        )

    def _apply(self, entity: WorkCenter, payload: WorkCenterCreate) -> None:
        entity.name = payload.name
        entity.optimal_batch = payload.optimal_batch
        entity.line_id = payload.line_id
