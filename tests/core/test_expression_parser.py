"""Unit tests for the fluent expression parser."""

import pytest

from firequery.core.parsers.expression import parse_query_expression, parse_query_value
from firequery.core.parsers.utils import (
    count_top_level_commas,
    get_string_context,
    is_escaped,
    scan_arguments,
    strip_quotes,
    unquote,
)
from firequery.domain.types.query import OrderByConfig, QueryParams, WhereCondition


class TestParseQueryExpression:
    """Tests for parse_query_expression."""

    def test_parse_full_chain(self):
        params = parse_query_expression(".collection('users').where('age','>=',21).limit(10).get()")

        assert params == QueryParams(
            collection="users",
            limit=10,
            where=(WhereCondition("age", ">=", 21),),
        )

    def test_defaults_when_clauses_missing(self):
        params = parse_query_expression("db.get()", default_collection="orders", default_limit=25)

        assert params.collection == "orders"
        assert params.limit == 25
        assert params.where == ()
        assert params.select == ()
        assert params.order_by is None

    def test_invalid_limits_fall_back_to_default(self):
        assert parse_query_expression(".limit(0)").limit == 50
        assert parse_query_expression(".limit('ten')").limit == 50
        assert parse_query_expression("", default_limit=0).limit == 50

    def test_multiple_where_keep_source_order(self):
        params = parse_query_expression(
            "db.collection('users').where('status', '==', 'active').where(\"age\", '<', 65)"
        )

        assert params.where == (
            WhereCondition("status", "==", "active"),
            WhereCondition("age", "<", 65),
        )

    def test_where_with_comma_and_paren_inside_string(self):
        params = parse_query_expression(".where('label', '==', 'a, (b)')")

        assert params.where == (WhereCondition("label", "==", "a, (b)"),)

    def test_where_with_array_value(self):
        params = parse_query_expression(".where('tags', 'array-contains-any', ['a', 'b'])")

        assert params.where[0].value == ["a", "b"]

    def test_incomplete_where_is_ignored(self):
        assert parse_query_expression(".where('age', '>=')").where == ()
        assert parse_query_expression(".where('age', '>=', ").where == ()
        assert parse_query_expression(".where(age, '>=', 1)").where == ()

    def test_select_fields(self):
        params = parse_query_expression(".select('name', \"email\")")

        assert params.select == ("name", "email")

    @pytest.mark.parametrize(
        "text, expected",
        [
            (".orderBy('age')", OrderByConfig("age", "asc")),
            (".orderBy('age', 'desc')", OrderByConfig("age", "desc")),
            (".orderBy('age', 'DESC')", OrderByConfig("age", "desc")),
            (".orderBy(\"age\", asc)", OrderByConfig("age", "asc")),
        ],
    )
    def test_order_by(self, text, expected):
        assert parse_query_expression(text).order_by == expected

    def test_backtick_collection(self):
        assert parse_query_expression(".collection(`logs`)").collection == "logs"

    def test_parsing_is_repeatable(self):
        text = ".collection('a').where('x', '==', true).orderBy('x', 'desc').limit(3)"
        assert parse_query_expression(text) == parse_query_expression(text)


class TestParseQueryValue:
    """Tests for parse_query_value."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("'active'", "active"),
            ('"active"', "active"),
            ("`active`", "active"),
            ("true", True),
            ("false", False),
            ("21", 21),
            ("-3", -3),
            ("3.5", 3.5),
            ("1e3", 1000.0),
            ("[1, 'two', false]", [1, "two", False]),
            ("[]", []),
            ("lastDoc", "lastDoc"),
            ("  42 ", 42),
        ],
    )
    def test_values(self, raw, expected):
        assert parse_query_value(raw) == expected

    def test_number_types(self):
        assert isinstance(parse_query_value("7"), int)
        assert isinstance(parse_query_value("7.0"), float)


class TestScanningHelpers:
    """Tests for the quote and nesting aware helpers."""

    def test_is_escaped(self):
        assert is_escaped("a\\'", 2)
        assert not is_escaped("a\\\\'", 3)
        assert not is_escaped("'", 0)

    def test_string_context(self):
        context = get_string_context("db.collection('use")
        assert context.in_string
        assert context.quote == "'"
        assert context.start_index == 14

        assert not get_string_context("where('a', 'b')").in_string
        assert get_string_context("x('it\\'s").in_string

    def test_scan_arguments_closed_call(self):
        scan = scan_arguments("'a', f(1, 2), [3, 4]) + rest")

        assert scan.arguments == ["'a'", "f(1, 2)", "[3, 4]"]
        assert scan.is_closed

    def test_scan_arguments_open_call(self):
        scan = scan_arguments("'a', ")

        assert scan.arguments == ["'a'", ""]
        assert not scan.is_closed

    def test_scan_arguments_empty_call(self):
        assert scan_arguments(")").arguments == []

    def test_count_top_level_commas(self):
        assert count_top_level_commas("") == 0
        assert count_top_level_commas("'a,b', ") == 1
        assert count_top_level_commas("'a', [1, 2], ") == 2

    def test_unquote_and_strip_quotes(self):
        assert unquote("'x'") == "x"
        assert unquote("x") is None
        assert unquote("'x\"") is None
        assert strip_quotes("'orders'") == "orders"
        assert strip_quotes("'orders") == "orders"
        assert strip_quotes("orders\"") == "orders"
        assert strip_quotes("orders") == "orders"
