"""Operation service."""

from metalflow.models.operation import Operation
from metalflow.repositories.reference_data import (
    OperationRepository,
    OperationTypeRepository,
    WorkCenterRepository,
)
from metalflow.schemas.operation import OperationCreate
from metalflow.services.reference_data import ReferenceDataService


class OperationService(ReferenceDataService[Operation]):
    label = "Operation"

    def __init__(
        self,
        operations: OperationRepository,
        operation_types: OperationTypeRepository,
        work_centers: WorkCenterRepository,
    ) -> None:
        super().__init__(operations)
        self.operation_types = operation_types
        self.work_centers = work_centers

    async def _validate_references(self, payload: OperationCreate) -> None:
        await self._require_enabled(
            self.operation_types, [payload.operation_type_id], "operationTypeId", "Operation type"
        )
        await self._require_enabled(
            self.work_centers, [payload.work_center_id], "workCenterId", "Work center"
        )

    def _apply(self, entity: Operation, payload: OperationCreate) -> None:
        entity.name = payload.name
        entity.setup_time_in_minutes = payload.setup_time_in_minutes
        entity.capacity = payload.capacity
        entity.operation_type_id = payload.operation_type_id
        entity.work_center_id = payload.work_center_id
