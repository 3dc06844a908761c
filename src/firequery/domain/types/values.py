"""Dynamic value domain and its wire encoding shapes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, TypedDict, Union

__all__ = [
    "DocumentReference",
    "DynamicValue",
    "GeoPoint",
    "Timestamp",
    "WireValue",
]


@dataclass(frozen=True, slots=True)
class Timestamp:
    """A point in time with nanosecond precision, as stored by the database."""

    seconds: int
    nanoseconds: int = 0


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A latitude/longitude pair."""

    latitude: float
    longitude: float


class DocumentReference(str):
    """A document path.

    Compares equal to the raw path string, but stays distinguishable from a
    plain string so that it encodes back to ``referenceValue``.
    """

    __slots__ = ()

    @property
    def path(self) -> str:
        return str(self)


DynamicValue = Union[
    None,
    bool,
    int,
    float,
    str,
    Timestamp,
    GeoPoint,
    DocumentReference,
    List["DynamicValue"],
    Dict[str, "DynamicValue"],
]


class WireValue(TypedDict, total=False):
    """Protocol-tagged value. Exactly one key is populated."""

    stringValue: str
    integerValue: str
    doubleValue: Any
    booleanValue: bool
    nullValue: None
    timestampValue: str
    geoPointValue: dict[str, float]
    arrayValue: dict[str, list[Any]]
    mapValue: dict[str, dict[str, Any]]
    referenceValue: str
