"""Shared create/update/delete flow for reference-data services."""

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from metalflow.core.exceptions import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from metalflow.models.base import BaseEntity
from metalflow.repositories.base import Repository
from metalflow.services.route_reconciliation import (
    RouteCollection,
    clear,
    distinct_ids,
    reconcile,
)

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseEntity)


class ReferenceDataService(Generic[EntityT]):
    """Name-unique, soft-deletable entity with optional route collections.

    Subclasses provide ``label``, ``_apply`` and, where needed,
    ``_validate_references`` and ``route_collections``: pairs of a
    ``RouteCollection`` and the payload field holding its target ids.
    """

    label: ClassVar[str] = "Record"
    route_collections: ClassVar[Sequence[tuple[RouteCollection[Any], str]]] = ()

    def __init__(self, repository: Repository[EntityT]) -> None:
        self.repository = repository

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_enabled(self) -> list[EntityT]:
        return await self.repository.get_all_enabled_with_details()

    async def get_by_id(self, entity_id: int) -> EntityT:
        entity = await self.repository.get_by_id_with_details(entity_id)
        if entity is None or not entity.enabled:
            raise NotFoundError(
                f"{self.label} with ID {entity_id} was not found or is inactive.",
                error_code="NotFound",
            )
        return entity

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, payload: BaseModel) -> EntityT:
        """Create a record, or reactivate a disabled one with the same name."""
        await self._validate_references(payload)

        name = payload.name
        matches = await self.repository.find_by_name(name)
        if any(match.enabled for match in matches):
            logger.warning("Rejected %s create: name %r already active", self.label, name)
            raise ConflictError(
                f"An active {self.label.lower()} named '{name}' already exists.",
                error_code="DuplicateName",
            )

        inactive = next((match for match in matches if not match.enabled), None)
        if inactive is not None:
            entity = await self.repository.get_by_id_with_details(inactive.id)
            for collection, _field in self.route_collections:
                clear(entity, collection)
            # Stale rows must be gone before replacements hit unique indexes.
            await self._persist(self.repository.flush, name)
            self._apply(entity, payload)
            entity.enabled = True
            self._reconcile(entity, payload)
            await self._persist(lambda: self.repository.update(entity), name)
            logger.info("Reactivated %s %s (%s)", self.label, entity.id, name)
        else:
            entity = self.repository.model()
            self._apply(entity, payload)
            self._reconcile(entity, payload)
            await self._persist(lambda: self.repository.add(entity), name)
            logger.info("Created %s %s (%s)", self.label, entity.id, name)

        return await self.get_by_id(entity.id)

    async def update(self, entity_id: int, payload: BaseModel) -> EntityT:
        entity = await self.repository.get_by_id_with_details(entity_id)
        if entity is None:
            raise NotFoundError(
                f"{self.label} with ID {entity_id} was not found.",
                error_code="NotFound",
            )
        if not entity.enabled:
            logger.warning("Rejected update of inactive %s %d", self.label, entity_id)
            raise ConflictError(
                f"Cannot update inactive {self.label.lower()} with ID {entity_id}. "
                "Reactivate it by creating it again.",
                error_code="InactiveRecord",
            )

        await self._validate_references(payload)

        name = payload.name
        if entity.name.lower() != name.lower():
            collisions = await self.repository.find_enabled_by_name(name, exclude_id=entity_id)
            if collisions:
                logger.warning("Rejected %s rename to %r: name in use", self.label, name)
                raise ConflictError(
                    f"Another active {self.label.lower()} named '{name}' already exists.",
                    error_code="DuplicateName",
                )

        self._apply(entity, payload)
        self._reconcile(entity, payload)
        await self._persist(lambda: self.repository.update(entity), name)
        logger.info("Updated %s %d", self.label, entity_id)

        return await self.get_by_id(entity_id)

    async def delete(self, entity_id: int) -> bool:
        """Soft delete. Deleting an already inactive record is a no-op."""
        entity = await self.repository.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(
                f"{self.label} with ID {entity_id} was not found.",
                error_code="NotFound",
            )
        if not entity.enabled:
            return True

        await self._ensure_deletable(entity)
        await self._persist(lambda: self.repository.soft_remove(entity), entity.name)
        logger.info("Soft-deleted %s %d", self.label, entity_id)
        return True

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    async def _validate_references(self, payload: BaseModel) -> None:
        """Check every related id in ``payload``. Default: nothing to check."""

    def _apply(self, entity: EntityT, payload: BaseModel) -> None:
        raise NotImplementedError

    async def _ensure_deletable(self, entity: EntityT) -> None:
        """Pre-delete dependency checks. Default: none."""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reconcile(self, entity: EntityT, payload: BaseModel) -> None:
        for collection, field in self.route_collections:
            result = reconcile(entity, collection, getattr(payload, field))
            if result.changed:
                logger.debug(
                    "%s %s: +%d -%d %s",
                    self.label,
                    getattr(entity, "id", None),
                    len(result.added),
                    len(result.removed),
                    collection.attribute,
                )

    async def _persist(self, write: Callable[[], Awaitable[Any]], name: str) -> None:
        try:
            await write()
        except SQLAlchemyError as exc:
            logger.exception("Failed to save %s %r", self.label, name)
            raise PersistenceError(
                f"Failed to save {self.label.lower()} '{name}'.",
                error_code="PersistenceFailure",
            ) from exc

    async def _require_enabled(
        self,
        repository: Repository[Any],
        ids: Iterable[int] | None,
        field: str,
        label: str,
        required: bool = True,
    ) -> None:
        """Fail unless every id in ``ids`` is an existing, enabled row.

        ``field`` is the request field name reported back to the client.
        """
        unique = distinct_ids(ids)
        if not unique:
            if required:
                message = f"At least one {label.lower()} ID is required."
                raise ValidationError(
                    message, error_code="MissingReference", details={field: [message]}
                )
            return

        found = await repository.find_enabled_ids(unique)
        missing = [i for i in unique if i not in found]
        if missing:
            message = (
                f"{label} ID(s) not found or inactive: "
                f"{', '.join(str(i) for i in missing)}."
            )
            logger.warning("Rejected %s: %s", self.label, message)
            raise ValidationError(
                message, error_code="InvalidReference", details={field: [message]}
            )
