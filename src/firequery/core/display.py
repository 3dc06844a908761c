"""
Display and edit helpers for decoded values.

Used by hosts rendering fetched rows and editing single cells or whole
documents as JSON.
"""

from __future__ import annotations

import json
from typing import Any

from firequery.core.codec import format_timestamp
from firequery.domain.types.values import DocumentReference, DynamicValue, GeoPoint, Timestamp


class DocumentParseError(ValueError):
    """Raised when document JSON typed by the user cannot be saved."""


def value_type(value: Any) -> str:
    """
    Return the display type label of a decoded value.

    Examples:
        None -> 'Null'
        42 -> 'Integer'
        4.2 -> 'Number'
        Timestamp(0) -> 'Timestamp'
    """
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, Timestamp):
        return "Timestamp"
    if isinstance(value, GeoPoint):
        return "GeoPoint"
    if isinstance(value, DocumentReference):
        return "Reference"
    if isinstance(value, (list, tuple)):
        return "Array"
    if isinstance(value, dict):
        return "Map"
    if isinstance(value, str):
        return "String"
    if isinstance(value, int):
        return "Integer"
    if isinstance(value, float):
        return "Integer" if value.is_integer() else "Number"
    return type(value).__name__


def format_display_value(value: DynamicValue) -> str:
    """
    Format a scalar for a table cell. Containers render as empty text.
    """
    kind = value_type(value)
    if kind in ("Null", "Array", "Map"):
        return ""
    if isinstance(value, Timestamp):
        return format_timestamp(value)
    if isinstance(value, GeoPoint):
        return f"({value.latitude}, {value.longitude})"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_edit_value(edit_value: str) -> DynamicValue:
    """
    Parse a cell edit into a typed value.

    JSON is tried first; otherwise ``null``, ``true``, ``false`` and numbers
    are recognized and anything else stays text. Empty input means no value.
    """
    try:
        return json.loads(edit_value)
    except (json.JSONDecodeError, TypeError):
        pass

    if edit_value == "":
        return None
    if edit_value == "true":
        return True
    if edit_value == "false":
        return False
    try:
        number = float(edit_value)
    except ValueError:
        return edit_value
    if number != number or number in (float("inf"), float("-inf")):
        return edit_value
    return int(number) if number.is_integer() and "." not in edit_value else number


def serialize_for_edit(value: Any) -> str:
    """Render a value as the text shown in an edit box."""
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, indent=2, default=_json_default)
    if value is None:
        return "null"
    return format_display_value(value)


def parse_document_json(text: str) -> dict[str, Any]:
    """
    Parse document JSON typed by the user.

    Raises:
        DocumentParseError: If the text is not valid JSON or not an object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentParseError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
    if not isinstance(data, dict):
        raise DocumentParseError("Document must be a JSON object")
    return data


def _json_default(value: Any) -> Any:
    if isinstance(value, Timestamp):
        return format_timestamp(value)
    if isinstance(value, GeoPoint):
        return {"latitude": value.latitude, "longitude": value.longitude}
    return str(value)
