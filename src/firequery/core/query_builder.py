"""
Structured query construction.

Turns parsed query parameters into the remote protocol's structured query
tree, and turns query responses back into decoded rows.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from firequery.core.codec import decode_fields, encode_value, to_wire_operator
from firequery.core.config import DEFAULT_LIMIT
from firequery.core.parsers.expression import parse_query_expression
from firequery.domain.types.query import (
    CompositeFilter,
    FieldFilter,
    ParsedDocument,
    QueryParams,
    StructuredQuery,
    WhereCondition,
)
from firequery.logger import get_logger
from firequery.utils import last_path_segment

logger = get_logger("query_builder")


def build_structured_query(params: QueryParams) -> StructuredQuery:
    """
    Build a wire-format structured query from parsed parameters.

    Multiple ``where`` conditions are always combined with AND, in source
    order. There is no OR or nested grouping.

    Args:
        params: Parsed query parameters

    Returns:
        StructuredQuery dictionary ready to be serialized as JSON
    """
    query: StructuredQuery = {
        "from": [{"collectionId": last_path_segment(params.collection)}],
        "limit": params.limit,
    }

    if params.select:
        query["select"] = {"fields": [{"fieldPath": field} for field in params.select]}

    if params.where:
        query["where"] = build_where_clause(params.where)

    if params.order_by:
        direction = "DESCENDING" if params.order_by.direction.upper() == "DESC" else "ASCENDING"
        query["orderBy"] = [{"field": {"fieldPath": params.order_by.field}, "direction": direction}]

    return query


def build_where_clause(conditions: Sequence[WhereCondition]) -> FieldFilter | CompositeFilter:
    """Build a bare field filter for one condition, an AND composite for several."""
    if len(conditions) == 1:
        return build_field_filter(conditions[0])
    return {
        "compositeFilter": {
            "op": "AND",
            "filters": [build_field_filter(condition) for condition in conditions],
        }
    }


def build_field_filter(condition: WhereCondition) -> FieldFilter:
    return {
        "fieldFilter": {
            "field": {"fieldPath": condition.field},
            "op": to_wire_operator(condition.operator),
            "value": encode_value(condition.value),
        }
    }


def parse_structured_query(
    query_text: str,
    collection_path: str,
    limit: int = DEFAULT_LIMIT,
) -> tuple[QueryParams, StructuredQuery]:
    """
    Parse an expression and build its structured query in one step.

    Args:
        query_text: The fluent expression text
        collection_path: Collection used when the expression names none
        limit: Limit used when the expression has none

    Returns:
        Tuple of (parsed parameters, structured query)
    """
    params = parse_query_expression(query_text, collection_path, limit)
    return params, build_structured_query(params)


def generate_default_query(collection_path: str, limit: int = DEFAULT_LIMIT) -> str:
    """Return the starter expression shown for a collection in the query editor."""
    return (
        "// Query with JavaScript using the Admin SDK\n"
        "async function run() {\n"
        f'    const query = await db.collection("{collection_path}")\n'
        f"        .limit({limit})\n"
        "        .get();\n"
        "    return query;\n"
        "}"
    )


def parse_query_response(
    response: Mapping[str, Any] | Sequence[Mapping[str, Any]],
    collection_path: str,
) -> list[ParsedDocument]:
    """
    Decode the rows of a query response.

    Items without a ``document`` (e.g. read-time only entries) are skipped.

    Args:
        response: One response item or a list of them
        collection_path: Collection path used to build each row's path

    Returns:
        Decoded documents in response order
    """
    items = [response] if isinstance(response, Mapping) else list(response)

    documents: list[ParsedDocument] = []
    for item in items:
        document = item.get("document") if isinstance(item, Mapping) else None
        if not document:
            continue
        doc_id = last_path_segment(document.get("name", ""))
        documents.append(
            ParsedDocument(
                id=doc_id,
                data=decode_fields(document.get("fields")),
                path=f"{collection_path}/{doc_id}",
            )
        )

    logger.debug(f"Decoded {len(documents)} document(s) from {len(items)} response item(s)")
    return documents
