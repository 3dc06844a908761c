"""Unit tests for the wire value codec."""

import pytest

from firequery.core.codec import (
    WIRE_OPERATORS,
    decode_fields,
    decode_value,
    encode_value,
    format_timestamp,
    parse_timestamp,
    to_wire_operator,
)
from firequery.domain.types.values import DocumentReference, GeoPoint, Timestamp


class TestOperators:
    """Tests for operator mapping."""

    @pytest.mark.parametrize(
        "operator, wire",
        [
            ("==", "EQUAL"),
            ("!=", "NOT_EQUAL"),
            ("<", "LESS_THAN"),
            ("<=", "LESS_THAN_OR_EQUAL"),
            (">", "GREATER_THAN"),
            (">=", "GREATER_THAN_OR_EQUAL"),
            ("array-contains", "ARRAY_CONTAINS"),
            ("array-contains-any", "ARRAY_CONTAINS_ANY"),
            ("in", "IN"),
            ("not-in", "NOT_IN"),
        ],
    )
    def test_known_operators(self, operator, wire):
        assert to_wire_operator(operator) == wire

    def test_unknown_operator_falls_back_to_equal(self):
        assert to_wire_operator("~=") == "EQUAL"
        assert to_wire_operator("") == "EQUAL"

    def test_table_covers_ten_operators(self):
        assert len(WIRE_OPERATORS) == 10


class TestEncodeValue:
    """Tests for encode_value."""

    def test_scalars(self):
        assert encode_value(None) == {"nullValue": None}
        assert encode_value(True) == {"booleanValue": True}
        assert encode_value(21) == {"integerValue": "21"}
        assert encode_value(3.5) == {"doubleValue": 3.5}
        assert encode_value("active") == {"stringValue": "active"}

    def test_integral_float_encodes_as_integer(self):
        assert encode_value(2.0) == {"integerValue": "2"}

    def test_bool_is_not_encoded_as_integer(self):
        assert encode_value(False) == {"booleanValue": False}

    def test_array_and_map(self):
        assert encode_value(["a", 1]) == {
            "arrayValue": {"values": [{"stringValue": "a"}, {"integerValue": "1"}]}
        }
        assert encode_value({"n": None}) == {"mapValue": {"fields": {"n": {"nullValue": None}}}}

    def test_variant_values(self):
        assert encode_value(Timestamp(1705314600, 500000000)) == {"timestampValue": "2024-01-15T10:30:00.5Z"}
        assert encode_value(GeoPoint(1.5, -2.25)) == {"geoPointValue": {"latitude": 1.5, "longitude": -2.25}}
        assert encode_value(DocumentReference("users/u1")) == {"referenceValue": "users/u1"}

    def test_unsupported_value_encodes_as_string(self):
        class Thing:
            def __str__(self):
                return "thing"

        assert encode_value(Thing()) == {"stringValue": "thing"}


class TestDecodeValue:
    """Tests for decode_value."""

    def test_missing_or_unknown_tags_decode_to_none(self):
        assert decode_value(None) is None
        assert decode_value({}) is None
        assert decode_value({"bytesValue": "AAE="}) is None

    def test_first_tag_in_priority_order_wins(self):
        assert decode_value({"stringValue": "a", "integerValue": "1"}) == "a"

    def test_numbers(self):
        assert decode_value({"integerValue": "42"}) == 42
        assert decode_value({"doubleValue": 1.25}) == 1.25
        assert decode_value({"integerValue": "not a number"}) is None

    def test_timestamp(self):
        assert decode_value({"timestampValue": "2024-01-15T10:30:00.5Z"}) == Timestamp(1705314600, 500000000)

    def test_unparsable_timestamp_keeps_raw_text(self):
        assert decode_value({"timestampValue": "yesterday"}) == "yesterday"

    def test_reference_stays_distinguishable(self):
        value = decode_value({"referenceValue": "users/u1"})
        assert value == "users/u1"
        assert isinstance(value, DocumentReference)
        assert value.path == "users/u1"

    def test_nested_fields(self):
        fields = {
            "name": {"stringValue": "Ada"},
            "tags": {"arrayValue": {"values": [{"stringValue": "x"}, {"booleanValue": True}]}},
            "address": {"mapValue": {"fields": {"zip": {"integerValue": "1000"}}}},
            "empty": {"arrayValue": {}},
        }
        assert decode_fields(fields) == {
            "name": "Ada",
            "tags": ["x", True],
            "address": {"zip": 1000},
            "empty": [],
        }

    def test_decode_fields_of_nothing(self):
        assert decode_fields(None) == {}


@pytest.mark.parametrize(
    "value",
    [
        None,
        True,
        0,
        -5,
        3.5,
        "",
        "hello",
        [1, "a", None],
        {"a": 1, "b": {"c": [True, 2.5]}},
        Timestamp(1705314600, 123456789),
        GeoPoint(37.5, -122.25),
        DocumentReference("projects/p/databases/(default)/documents/users/u1"),
    ],
)
def test_encode_then_decode_preserves_value(value):
    assert decode_value(encode_value(value)) == value


class TestTimestamps:
    """Tests for timestamp text handling."""

    def test_format_strips_trailing_zeros(self):
        assert format_timestamp(Timestamp(0)) == "1970-01-01T00:00:00Z"
        assert format_timestamp(Timestamp(0, 120000000)) == "1970-01-01T00:00:00.12Z"

    def test_parse_with_offset(self):
        assert parse_timestamp("2024-01-15T12:30:00+02:00") == Timestamp(1705314600)

    def test_parse_rejects_other_text(self):
        assert parse_timestamp("2024-13-45T00:00:00Z") is None
        assert parse_timestamp("not a date") is None
