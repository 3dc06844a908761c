"""Shared domain types."""

from firequery.domain.types.completion import (
    AutocompleteContext,
    Completion,
    CompletionKind,
    MethodCallContext,
)
from firequery.domain.types.query import (
    CompositeFilter,
    FieldFilter,
    OrderByConfig,
    ParsedDocument,
    QueryParams,
    StructuredQuery,
    WhereCondition,
)
from firequery.domain.types.values import (
    DocumentReference,
    DynamicValue,
    GeoPoint,
    Timestamp,
    WireValue,
)

__all__ = [
    "AutocompleteContext",
    "Completion",
    "CompletionKind",
    "MethodCallContext",
    "CompositeFilter",
    "FieldFilter",
    "OrderByConfig",
    "ParsedDocument",
    "QueryParams",
    "StructuredQuery",
    "WhereCondition",
    "DocumentReference",
    "DynamicValue",
    "GeoPoint",
    "Timestamp",
    "WireValue",
]
