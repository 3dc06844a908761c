"""Query parameter and structured query types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypedDict, Union

from firequery.domain.types.values import DynamicValue, WireValue

__all__ = [
    "CompositeFilter",
    "FieldFilter",
    "OrderByConfig",
    "ParsedDocument",
    "QueryParams",
    "StructuredQuery",
    "WhereCondition",
]

Direction = Literal["asc", "desc"]


@dataclass(frozen=True, slots=True)
class WhereCondition:
    """A single ``where(field, operator, value)`` clause."""

    field: str
    operator: str
    value: DynamicValue


@dataclass(frozen=True, slots=True)
class OrderByConfig:
    """Ordering on one field. ``direction`` is always normalized to lower case."""

    field: str
    direction: Direction = "asc"


@dataclass(frozen=True, slots=True)
class QueryParams:
    """Structured parameters extracted from a fluent expression."""

    collection: str
    limit: int
    select: tuple[str, ...] = ()
    where: tuple[WhereCondition, ...] = ()
    order_by: OrderByConfig | None = None


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    """A decoded row returned by a query."""

    id: str
    data: dict[str, DynamicValue] = field(default_factory=dict)
    path: str = ""


class FieldPath(TypedDict):
    fieldPath: str


class _FieldFilterBody(TypedDict):
    field: FieldPath
    op: str
    value: WireValue


class FieldFilter(TypedDict):
    fieldFilter: _FieldFilterBody


class _CompositeFilterBody(TypedDict):
    op: str
    filters: list[FieldFilter]


class CompositeFilter(TypedDict):
    compositeFilter: _CompositeFilterBody


class CollectionSelector(TypedDict):
    collectionId: str


class Projection(TypedDict):
    fields: list[FieldPath]


class Order(TypedDict):
    field: FieldPath
    direction: str


# Functional form: ``from`` is a keyword. ``from`` and ``limit`` are always
# present, the other keys only when used.
StructuredQuery = TypedDict(
    "StructuredQuery",
    {
        "from": list[CollectionSelector],
        "limit": int,
        "select": Projection,
        "where": Union[FieldFilter, CompositeFilter],
        "orderBy": list[Order],
    },
    total=False,
)
