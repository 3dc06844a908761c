"""
Conversion between dynamic values and the remote protocol's tagged wire values.

Encoding is used for filter values when building structured queries; decoding
is used for the field maps of fetched rows.
"""

from __future__ import annotations

import calendar
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from firequery.domain.types.values import (
    DocumentReference,
    DynamicValue,
    GeoPoint,
    Timestamp,
    WireValue,
)
from firequery.logger import get_logger

logger = get_logger("codec")

WIRE_OPERATORS: Mapping[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "array-contains": "ARRAY_CONTAINS",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
    "in": "IN",
    "not-in": "NOT_IN",
}

_TIMESTAMP_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?([Zz]|[+-]\d{2}:?\d{2})?$"
)


def to_wire_operator(operator: str) -> str:
    """
    Map a comparison operator to its wire protocol name.

    Unrecognized operators fall back to ``EQUAL`` instead of failing.

    Examples:
        '>=' -> 'GREATER_THAN_OR_EQUAL'
        'array-contains' -> 'ARRAY_CONTAINS'
        '~=' -> 'EQUAL'
    """
    wire = WIRE_OPERATORS.get(operator)
    if wire is None:
        logger.debug(f"Unknown operator {operator!r}, falling back to EQUAL")
        return "EQUAL"
    return wire


def format_timestamp(value: Timestamp) -> str:
    """Render a timestamp as RFC 3339 text in UTC (``2024-01-15T10:30:00.5Z``)."""
    moment = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=value.seconds)
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if value.nanoseconds:
        text += "." + f"{value.nanoseconds:09d}".rstrip("0")
    return text + "Z"


def parse_timestamp(text: str) -> Timestamp | None:
    """
    Parse RFC 3339 timestamp text.

    Returns:
        Timestamp, or None when the text is not a timestamp
    """
    match = _TIMESTAMP_PATTERN.match(text.strip())
    if not match:
        return None

    year, month, day, hour, minute, second, fraction, zone = match.groups()
    try:
        moment = datetime(int(year), int(month), int(day), int(hour), int(minute), int(second))
    except ValueError:
        return None

    seconds = calendar.timegm(moment.timetuple())
    if zone and zone not in ("Z", "z"):
        sign = 1 if zone[0] == "+" else -1
        digits = zone[1:].replace(":", "")
        seconds -= sign * (int(digits[:2]) * 3600 + int(digits[2:]) * 60)

    nanoseconds = int(fraction.ljust(9, "0")) if fraction else 0
    return Timestamp(seconds=seconds, nanoseconds=nanoseconds)


def encode_value(value: Any) -> WireValue:
    """
    Encode a dynamic value into its wire representation.

    Values outside the dynamic value domain are encoded as their string form
    rather than rejected.
    """
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        if value.is_integer():
            return {"integerValue": str(int(value))}
        return {"doubleValue": value}
    if isinstance(value, DocumentReference):
        return {"referenceValue": str(value)}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, Timestamp):
        return {"timestampValue": format_timestamp(value)}
    if isinstance(value, GeoPoint):
        return {"geoPointValue": {"latitude": value.latitude, "longitude": value.longitude}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(item) for item in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": {str(key): encode_value(item) for key, item in value.items()}}}

    logger.debug(f"Encoding unsupported value of type {type(value).__name__} as string")
    return {"stringValue": str(value)}


def decode_value(value: Mapping[str, Any] | None) -> DynamicValue:
    """
    Decode a wire value into a dynamic value.

    The first populated tag wins, checked in this order: string, integer,
    double, boolean, null, timestamp, geopoint, array, map, reference.
    A value with no recognized tag decodes to None.
    """
    if not value or not isinstance(value, Mapping):
        return None

    if "stringValue" in value:
        return value["stringValue"]
    if "integerValue" in value:
        return _decode_integer(value["integerValue"])
    if "doubleValue" in value:
        return _decode_double(value["doubleValue"])
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "nullValue" in value:
        return None
    if "timestampValue" in value:
        raw = value["timestampValue"]
        parsed = parse_timestamp(raw) if isinstance(raw, str) else None
        if parsed is None:
            logger.warning(f"Unparsable timestampValue {raw!r}, keeping raw text")
            return raw
        return parsed
    if "geoPointValue" in value:
        point = value["geoPointValue"] or {}
        return GeoPoint(
            latitude=float(point.get("latitude", 0.0)),
            longitude=float(point.get("longitude", 0.0)),
        )
    if "arrayValue" in value:
        values = (value["arrayValue"] or {}).get("values") or []
        return [decode_value(item) for item in values]
    if "mapValue" in value:
        return decode_fields((value["mapValue"] or {}).get("fields"))
    if "referenceValue" in value:
        return DocumentReference(value["referenceValue"])

    logger.debug(f"Wire value has no recognized tag: {sorted(value)}")
    return None


def decode_fields(fields: Mapping[str, Any] | None) -> dict[str, DynamicValue]:
    """
    Decode a wire field map (a fetched document's ``fields``).

    Args:
        fields: Mapping of field name to wire value, or None

    Returns:
        Mapping of field name to decoded value
    """
    if not fields:
        return {}
    return {key: decode_value(item) for key, item in fields.items()}


def _decode_integer(raw: Any) -> int | None:
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Unparsable integerValue {raw!r}")
        return None


def _decode_double(raw: Any) -> float | None:
    try:
        return float(raw)
    except (TypeError, ValueError):
        logger.warning(f"Unparsable doubleValue {raw!r}")
        return None
