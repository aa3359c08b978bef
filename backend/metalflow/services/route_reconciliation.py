"""Route reconciliation.

Turns an owner's current route collection into one whose targets match a
requested id list:

- rows whose target is no longer requested are removed;
- rows whose target is still requested are kept as-is, with their order;
- requested targets without a row get a new row, numbered after the
  highest remaining order, in request order (duplicates ignored).

The owner's collection must already be loaded. Nothing is persisted here;
the caller flushes through its repository afterwards.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from metalflow.models.routes import (
    LineWorkCenterRoute,
    ProductAvailablePerLine,
    ProductOperationRoute,
    WorkCenterOperationRoute,
)

RouteT = TypeVar("RouteT")

# Transport-time placeholders for new rows until planners set real values.
DEFAULT_LINE_TRANSPORT_MINUTES = 5
DEFAULT_WORK_CENTER_TRANSPORT_MINUTES = 0


@dataclass(frozen=True)
class RouteCollection(Generic[RouteT]):
    """How to reconcile one association collection of an owner.

    ``factory`` receives the target id, the order to assign (None for
    unordered collections) and the creation timestamp.
    """

    attribute: str
    target_key: str
    factory: Callable[[int, int | None, datetime], RouteT]
    ordered: bool = True

    def rows(self, owner: Any) -> list[RouteT]:
        return getattr(owner, self.attribute)

    def target_of(self, row: RouteT) -> int:
        return getattr(row, self.target_key)


@dataclass
class ReconcileResult(Generic[RouteT]):
    added: list[RouteT] = field(default_factory=list)
    removed: list[RouteT] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def distinct_ids(ids: Iterable[int] | None) -> list[int]:
    """Drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(ids or ()))


def reconcile(
    owner: Any,
    collection: RouteCollection[RouteT],
    target_ids: Iterable[int] | None,
    now: datetime | None = None,
) -> ReconcileResult[RouteT]:
    """Bring ``owner``'s collection in line with ``target_ids``.

    An empty or None ``target_ids`` clears the collection; rejecting that
    for mandatory associations is the caller's job.
    """
    desired = distinct_ids(target_ids)
    desired_set = set(desired)
    rows = collection.rows(owner)
    result: ReconcileResult[RouteT] = ReconcileResult()

    for row in list(rows):
        if collection.target_of(row) not in desired_set:
            rows.remove(row)
            result.removed.append(row)

    existing = {collection.target_of(row) for row in rows}
    next_order = None
    if collection.ordered:
        next_order = max((row.order for row in rows), default=0) + 1

    stamp = now or datetime.now(timezone.utc)
    for target_id in desired:
        if target_id in existing:
            continue
        row = collection.factory(target_id, next_order, stamp)
        rows.append(row)
        result.added.append(row)
        if next_order is not None:
            next_order += 1

    return result


def clear(owner: Any, collection: RouteCollection[RouteT]) -> list[RouteT]:
    """Remove every row of the collection, returning what was removed."""
    rows = collection.rows(owner)
    removed = list(rows)
    rows.clear()
    return removed


LINE_WORK_CENTERS: RouteCollection[LineWorkCenterRoute] = RouteCollection(
    attribute="work_center_routes",
    target_key="work_center_id",
    factory=lambda target_id, order, now: LineWorkCenterRoute(
        work_center_id=target_id,
        order=order,
        version=1,
        transport_time_in_minutes=DEFAULT_LINE_TRANSPORT_MINUTES,
        effective_start_date=now,
        effective_end_date=None,
        enabled=True,
        created_at=now,
        last_update=now,
    ),
)

LINE_PRODUCTS: RouteCollection[ProductAvailablePerLine] = RouteCollection(
    attribute="available_products",
    target_key="product_id",
    factory=lambda target_id, _order, now: ProductAvailablePerLine(
        product_id=target_id,
        enabled=True,
        created_at=now,
        last_update=now,
    ),
    ordered=False,
)

WORK_CENTER_OPERATION_TYPES: RouteCollection[WorkCenterOperationRoute] = RouteCollection(
    attribute="operation_routes",
    target_key="operation_type_id",
    factory=lambda target_id, order, now: WorkCenterOperationRoute(
        operation_type_id=target_id,
        name=None,
        order=order,
        version=1,
        transport_time_in_minutes=DEFAULT_WORK_CENTER_TRANSPORT_MINUTES,
        effective_start_date=now,
        effective_end_date=None,
        enabled=True,
        created_at=now,
        last_update=now,
    ),
)

PRODUCT_OPERATION_TYPES: RouteCollection[ProductOperationRoute] = RouteCollection(
    attribute="operation_routes",
    target_key="operation_type_id",
    factory=lambda target_id, order, now: ProductOperationRoute(
        operation_type_id=target_id,
        order=order,
        version=1,
        effective_start_date=now,
        effective_end_date=None,
        enabled=True,
        created_at=now,
        last_update=now,
    ),
)
