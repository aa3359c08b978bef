"""Generic async repository over one SQLAlchemy model."""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import LoaderOption

from metalflow.models.base import BaseEntity

EntityT = TypeVar("EntityT", bound=BaseEntity)


class Repository(Generic[EntityT]):
    """Entity store for one model.

    Subclasses set ``model`` and, when the entity owns collections,
    ``detail_options``: the loader options that materialize everything a
    "with details" read must return. Route collections are mapped with
    ``lazy="raise"``, so only these reads may hand out owners whose
    collections are traversed.

    Writes only flush; the request's session commits or rolls back.
    """

    model: ClassVar[type[BaseEntity]]
    detail_options: ClassVar[Sequence[LoaderOption]] = ()

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_id(self, entity_id: int) -> EntityT | None:
        return await self.db.get(self.model, entity_id)

    async def get_by_id_with_details(self, entity_id: int) -> EntityT | None:
        query = (
            select(self.model)
            .options(*self.detail_options)
            .where(self.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_all_enabled(self) -> list[EntityT]:
        query = select(self.model).where(self.model.enabled.is_(True)).order_by(self.model.id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_all_enabled_with_details(self) -> list[EntityT]:
        query = (
            select(self.model)
            .options(*self.detail_options)
            .where(self.model.enabled.is_(True))
            .order_by(self.model.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find(self, *criteria: ColumnElement[bool]) -> list[EntityT]:
        result = await self.db.execute(select(self.model).where(*criteria))
        return list(result.scalars().all())

    async def find_by_name(self, name: str) -> list[EntityT]:
        """All rows whose name matches case-insensitively, enabled or not."""
        return await self.find(func.lower(self.model.name) == name.lower())

    async def find_enabled_by_name(
        self, name: str, exclude_id: int | None = None
    ) -> list[EntityT]:
        criteria: list[Any] = [
            func.lower(self.model.name) == name.lower(),
            self.model.enabled.is_(True),
        ]
        if exclude_id is not None:
            criteria.append(self.model.id != exclude_id)
        return await self.find(*criteria)

    async def find_enabled_ids(self, ids: Sequence[int]) -> set[int]:
        """Subset of ``ids`` that exist and are enabled."""
        if not ids:
            return set()
        result = await self.db.execute(
            select(self.model.id).where(
                self.model.id.in_(ids), self.model.enabled.is_(True)
            )
        )
        return set(result.scalars().all())

    async def add(self, entity: EntityT) -> EntityT:
        now = datetime.now(timezone.utc)
        entity.created_at = now
        entity.last_update = now
        entity.enabled = True
        self.db.add(entity)
        await self.db.flush()
        return entity

    async def update(self, entity: EntityT) -> EntityT:
        entity.last_update = datetime.now(timezone.utc)
        await self.db.flush()
        return entity

    async def soft_remove(self, entity: EntityT) -> EntityT:
        entity.enabled = False
        entity.last_update = datetime.now(timezone.utc)
        await self.db.flush()
        return entity

    async def flush(self) -> None:
        await self.db.flush()
