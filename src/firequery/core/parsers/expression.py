"""Fluent query expression parser.

Extracts query parameters from method-chaining text such as
``db.collection('users').where('age', '>=', 21).limit(10).get()``.

This is targeted pattern extraction, not a grammar: each clause is found
anywhere in the text independently, and calls the parser does not know
about are ignored.
"""

from __future__ import annotations

import re

from firequery.core.config import DEFAULT_LIMIT
from firequery.core.parsers.utils import LITERAL_QUOTES, scan_arguments, unquote
from firequery.domain.types.query import OrderByConfig, QueryParams, WhereCondition
from firequery.domain.types.values import DynamicValue
from firequery.logger import get_logger

logger = get_logger("parsers.expression")

_Q = "[\"'`]"

QUERY_PATTERNS = {
    "collection": re.compile(rf"\.collection\s*\(\s*{_Q}([^\"'`]+){_Q}\s*\)"),
    "limit": re.compile(r"\.limit\s*\(\s*(\d+)\s*\)"),
    "select": re.compile(r"\.select\s*\("),
    "where": re.compile(r"\.where\s*\("),
    "order_by": re.compile(
        rf"\.orderBy\s*\(\s*{_Q}([^\"'`]+){_Q}(?:\s*,\s*{_Q}?(asc|desc){_Q}?)?\s*\)",
        re.IGNORECASE,
    ),
}

_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_query_value(raw_value: str) -> DynamicValue:
    """
    Parse a ``where`` value expression into a typed value.

    Examples:
        "'active'" -> 'active'
        'true' -> True
        '21' -> 21
        '3.5' -> 3.5
        "['a', 2]" -> ['a', 2]
        'lastDoc' -> 'lastDoc' (raw token text)
    """
    trimmed = raw_value.strip()

    if trimmed[:1] in LITERAL_QUOTES:
        inner = unquote(trimmed)
        return inner if inner is not None else trimmed[1:]

    if trimmed == "true":
        return True
    if trimmed == "false":
        return False

    if len(trimmed) >= 2 and trimmed[0] == "[" and trimmed[-1] == "]":
        return [parse_query_value(item) for item in scan_arguments(trimmed[1:-1]).arguments]

    if _NUMBER_PATTERN.fullmatch(trimmed):
        if any(marker in trimmed for marker in ".eE"):
            return float(trimmed)
        return int(trimmed)

    return trimmed


def parse_query_expression(
    query_string: str,
    default_collection: str = "",
    default_limit: int = DEFAULT_LIMIT,
) -> QueryParams:
    """
    Extract query parameters from a fluent expression.

    Args:
        query_string: The raw expression text
        default_collection: Collection used when the text has no ``collection(...)`` call
        default_limit: Limit used when the text has no valid ``limit(...)`` call

    Returns:
        QueryParams; parsing never fails, missing or invalid clauses fall back
        to defaults
    """
    if default_limit < 1:
        logger.debug(f"Non-positive default limit {default_limit}, using {DEFAULT_LIMIT}")
        default_limit = DEFAULT_LIMIT

    collection_match = QUERY_PATTERNS["collection"].search(query_string)
    collection = collection_match.group(1) if collection_match else default_collection

    params = QueryParams(
        collection=collection,
        limit=_extract_limit(query_string, default_limit),
        select=_extract_select(query_string),
        where=_extract_where(query_string),
        order_by=_extract_order_by(query_string),
    )
    logger.debug(
        f"Parsed expression: collection={params.collection!r} limit={params.limit} "
        f"where={len(params.where)} select={len(params.select)} order_by={params.order_by}"
    )
    return params


def _extract_limit(query_string: str, default_limit: int) -> int:
    match = QUERY_PATTERNS["limit"].search(query_string)
    if not match:
        return default_limit
    limit = int(match.group(1))
    if limit < 1:
        logger.debug(f"Ignoring non-positive limit {limit}")
        return default_limit
    return limit


def _extract_select(query_string: str) -> tuple[str, ...]:
    match = QUERY_PATTERNS["select"].search(query_string)
    if not match:
        return ()
    fields = (unquote(argument) for argument in scan_arguments(query_string, match.end()).arguments)
    return tuple(field for field in fields if field)


def _extract_where(query_string: str) -> tuple[WhereCondition, ...]:
    conditions: list[WhereCondition] = []
    for match in QUERY_PATTERNS["where"].finditer(query_string):
        scan = scan_arguments(query_string, match.end())
        if not scan.is_closed or len(scan.arguments) < 3:
            continue

        field, operator, raw_value = scan.arguments[0], scan.arguments[1], scan.arguments[2]
        field_name = unquote(field)
        operator_name = unquote(operator)
        if not field_name or not operator_name or not raw_value:
            continue

        conditions.append(
            WhereCondition(field=field_name, operator=operator_name, value=parse_query_value(raw_value))
        )
    return tuple(conditions)


def _extract_order_by(query_string: str) -> OrderByConfig | None:
    match = QUERY_PATTERNS["order_by"].search(query_string)
    if not match:
        return None
    direction = (match.group(2) or "asc").lower()
    return OrderByConfig(field=match.group(1), direction=direction)  # type: ignore[arg-type]
