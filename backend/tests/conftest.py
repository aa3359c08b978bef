"""Pytest configuration with fixtures for async testing."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from metalflow.models.line import Line
from metalflow.models.operation import Operation
from metalflow.models.operation_type import OperationType
from metalflow.models.product import Product
from metalflow.models.routes import (
    LineWorkCenterRoute,
    ProductOperationRoute,
    WorkCenterOperationRoute,
)
from metalflow.models.work_center import WorkCenter
from metalflow.repositories.base import Repository

ROUTE_ATTRIBUTES = ("work_center_routes", "available_products", "operation_routes")


# ---------------------------------------------------------------------------
# Test Data Factories (transient ORM instances)
# ---------------------------------------------------------------------------


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _base(counter: int) -> dict[str, Any]:
    now = _now()
    return {"id": counter, "enabled": True, "created_at": now, "last_update": now}


class LineFactory:
    """Factory for creating Line instances for testing."""

    _counter = 0

    @classmethod
    def create(cls, **overrides: Any) -> Line:
        cls._counter += 1
        defaults = {
            **_base(cls._counter),
            "name": f"Line-{cls._counter}",
            "work_center_routes": [],
            "available_products": [],
        }
        return Line(**{**defaults, **overrides})


class WorkCenterFactory:
    """Factory for creating WorkCenter instances for testing."""

    _counter = 0

    @classmethod
    def create(cls, **overrides: Any) -> WorkCenter:
        cls._counter += 1
        defaults = {
            **_base(cls._counter),
            "name": f"WC-{cls._counter}",
            "optimal_batch": Decimal("25.00"),
            "line_id": 1,
            "operation_routes": [],
        }
        return WorkCenter(**{**defaults, **overrides})


class ProductFactory:
    """Factory for creating Product instances for testing."""

    _counter = 0

    @classmethod
    def create(cls, **overrides: Any) -> Product:
        cls._counter += 1
        defaults = {
            **_base(cls._counter),
            "name": f"Coil-{cls._counter}",
            "unit_price_per_ton": Decimal("850.00"),
            "profit_margin": Decimal("0.1500"),
            "priority": 1,
            "penalty_cost": Decimal("120.00"),
            "operation_routes": [],
        }
        return Product(**{**defaults, **overrides})


class OperationTypeFactory:
    """Factory for creating OperationType instances for testing."""

    _counter = 0

    @classmethod
    def create(cls, **overrides: Any) -> OperationType:
        cls._counter += 1
        defaults = {**_base(cls._counter), "name": f"OpType-{cls._counter}"}
        return OperationType(**{**defaults, **overrides})


class OperationFactory:
    """Factory for creating Operation instances for testing."""

    _counter = 0

    @classmethod
    def create(cls, **overrides: Any) -> Operation:
        cls._counter += 1
        defaults = {
            **_base(cls._counter),
            "name": f"Op-{cls._counter}",
            "setup_time_in_minutes": 15.0,
            "capacity": 12.5,
            "operation_type_id": 1,
            "work_center_id": 1,
        }
        return Operation(**{**defaults, **overrides})


def line_route(work_center_id: int, order: int, route_id: int | None = None) -> LineWorkCenterRoute:
    now = _now()
    return LineWorkCenterRoute(
        id=route_id if route_id is not None else 100 + order,
        work_center_id=work_center_id,
        order=order,
        version=1,
        transport_time_in_minutes=5,
        effective_start_date=now,
        effective_end_date=None,
    )


def work_center_route(operation_type_id: int, order: int) -> WorkCenterOperationRoute:
    now = _now()
    return WorkCenterOperationRoute(
        id=200 + order,
        operation_type_id=operation_type_id,
        order=order,
        version=1,
        transport_time_in_minutes=0,
        effective_start_date=now,
        effective_end_date=None,
    )


def product_route(operation_type_id: int, order: int) -> ProductOperationRoute:
    now = _now()
    return ProductOperationRoute(
        id=300 + order,
        operation_type_id=operation_type_id,
        order=order,
        version=1,
        effective_start_date=now,
        effective_end_date=None,
    )


# ---------------------------------------------------------------------------
# In-memory repository (AsyncMock with dict-backed behaviour)
# ---------------------------------------------------------------------------


def _assign_ids(entity: Any, store: dict[int, Any], route_ids: list[int]) -> None:
    """Give the entity and any new route rows ids, as a flush would."""
    if entity.id is None:
        entity.id = max(store, default=0) + 1
    store[entity.id] = entity
    for attribute in ROUTE_ATTRIBUTES:
        if attribute not in type(entity).__mapper__.relationships:
            continue
        for row in getattr(entity, attribute):
            if row.id is None:
                route_ids[0] += 1
                row.id = route_ids[0]


def make_repository(model: type, *rows: Any) -> AsyncMock:
    """AsyncMock repository backed by a dict of ``rows`` keyed by id."""
    store: dict[int, Any] = {row.id: row for row in rows}
    route_ids = [1000]
    repo = AsyncMock(spec=Repository)
    repo.model = model
    repo.store = store

    async def get_by_id(entity_id: int) -> Any:
        return store.get(entity_id)

    async def get_all_enabled() -> list[Any]:
        return [row for row in store.values() if row.enabled]

    async def find_by_name(name: str) -> list[Any]:
        return [row for row in store.values() if row.name.lower() == name.lower()]

    async def find_enabled_by_name(name: str, exclude_id: int | None = None) -> list[Any]:
        return [
            row
            for row in store.values()
            if row.enabled and row.name.lower() == name.lower() and row.id != exclude_id
        ]

    async def find_enabled_ids(ids: Any) -> set[int]:
        return {i for i in ids if i in store and store[i].enabled}

    async def add(entity: Any) -> Any:
        entity.created_at = entity.last_update = _now()
        entity.enabled = True
        _assign_ids(entity, store, route_ids)
        return entity

    async def update(entity: Any) -> Any:
        entity.last_update = _now()
        _assign_ids(entity, store, route_ids)
        return entity

    async def soft_remove(entity: Any) -> Any:
        entity.enabled = False
        entity.last_update = _now()
        return entity

    repo.get_by_id.side_effect = get_by_id
    repo.get_by_id_with_details.side_effect = get_by_id
    repo.get_all_enabled.side_effect = get_all_enabled
    repo.get_all_enabled_with_details.side_effect = get_all_enabled
    repo.find_by_name.side_effect = find_by_name
    repo.find_enabled_by_name.side_effect = find_enabled_by_name
    repo.find_enabled_ids.side_effect = find_enabled_ids
    repo.add.side_effect = add
    repo.update.side_effect = update
    repo.soft_remove.side_effect = soft_remove
    return repo


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def line_factory():
    """Provide LineFactory for tests."""
    LineFactory._counter = 0
    return LineFactory


@pytest.fixture
def work_center_factory():
    """Provide WorkCenterFactory for tests."""
    WorkCenterFactory._counter = 0
    return WorkCenterFactory


@pytest.fixture
def product_factory():
    """Provide ProductFactory for tests."""
    ProductFactory._counter = 0
    return ProductFactory


@pytest.fixture
def operation_type_factory():
    """Provide OperationTypeFactory for tests."""
    OperationTypeFactory._counter = 0
    return OperationTypeFactory


@pytest.fixture
def operation_factory():
    """Provide OperationFactory for tests."""
    OperationFactory._counter = 0
    return OperationFactory


@pytest.fixture
def mock_db():
    """Provide a mock AsyncSession for unit tests."""
    session = AsyncMock(spec=AsyncSession)
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    return session
