"""Expression parsing package."""

from firequery.core.parsers.expression import parse_query_expression, parse_query_value
from firequery.core.parsers.utils import (
    ArgumentScan,
    StringContext,
    count_top_level_commas,
    get_string_context,
    is_escaped,
    scan_arguments,
    strip_quotes,
    unquote,
)

__all__ = [
    "parse_query_expression",
    "parse_query_value",
    "ArgumentScan",
    "StringContext",
    "count_top_level_commas",
    "get_string_context",
    "is_escaped",
    "scan_arguments",
    "strip_quotes",
    "unquote",
]
