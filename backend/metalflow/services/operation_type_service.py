"""OperationType service."""

from metalflow.models.operation_type import OperationType
from metalflow.repositories.reference_data import OperationTypeRepository
from metalflow.schemas.operation_type import OperationTypeCreate
from metalflow.services.reference_data import ReferenceDataService


class OperationTypeService(ReferenceDataService[OperationType]):
    label = "Operation type"

    def __init__(self, operation_types: OperationTypeRepository) -> None:
        super().__init__(operation_types)

    def _apply(self, entity: OperationType, payload: OperationTypeCreate) -> None:
        entity.name = payload.name
