"""Tests for payload extraction and message derivation."""

import pytest

from core.exceptions import EmptyBody, InvalidJSON
from core.transform import derive_message, dump_json, extract_payload


class TestExtractPayload:
    """Tests for extract_payload."""

    def test_get_uses_query_mapping(self):
        query = {"a": "1", "b": ["2", "3"]}
        assert extract_payload("GET", '{"ignored": true}', query) == query

    @pytest.mark.parametrize("body", [None, ""])
    def test_empty_body(self, body):
        with pytest.raises(EmptyBody) as exc_info:
            extract_payload("POST", body, {})
        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == "empty_body"

    def test_invalid_json(self):
        with pytest.raises(InvalidJSON) as exc_info:
            extract_payload("POST", "{not json", {})
        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == "invalid_json"

    @pytest.mark.parametrize(
        "body,expected",
        [
            ('{"a": 1}', {"a": 1}),
            ("[1, 2]", [1, 2]),
            ('"text"', "text"),
            ("42", 42),
            ("true", True),
            ("null", None),
        ],
    )
    def test_any_json_type(self, body, expected):
        assert extract_payload("PUT", body, {}) == expected

    @pytest.mark.parametrize("body", ["NaN", "Infinity", "-Infinity", '{"a": -Infinity}', "[1, NaN]"])
    def test_non_standard_constants_rejected(self, body):
        with pytest.raises(InvalidJSON):
            extract_payload("POST", body, {})

    def test_integral_floats_become_ints(self):
        assert extract_payload("POST", '{"a": 1.0, "b": 1e5, "c": 1.5}', {}) == {"a": 1, "b": 100000, "c": 1.5}


class TestDeriveMessage:
    """Tests for derive_message."""

    def test_message_field(self):
        assert derive_message('{"message":"hi"}') == "hi"

    def test_non_string_field_is_serialized(self):
        assert derive_message('{"result":{"x":1}}') == '{"x":1}'

    def test_plain_text(self):
        assert derive_message("plain text") == "plain text"

    def test_empty_text(self):
        assert derive_message("") == ""

    def test_candidate_order(self):
        assert derive_message('{"result":"r","text":"t","body":"b"}') == "t"
        assert derive_message('{"response":"r","result":"x"}') == "r"

    def test_null_field_is_serialized(self):
        assert derive_message('{"message":null}') == "null"

    def test_empty_string_field_is_used(self):
        assert derive_message('{"message":"","text":"t"}') == ""

    def test_no_candidate_serializes_object(self):
        assert derive_message('{"a": 1, "b": [1, 2]}') == '{"a":1,"b":[1,2]}'

    @pytest.mark.parametrize(
        "text,expected",
        [
            ('"bare"', "bare"),
            ("12", "12"),
            ("true", "true"),
            ("null", "null"),
            ("[1, 2]", "[1,2]"),
        ],
    )
    def test_non_object_json(self, text, expected):
        assert derive_message(text) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1.0", "1"),
            ("1e5", "100000"),
            ('{"result": 1.0}', "1"),
            ('{"result": [2.50, 1e21]}', "[2.5,1e+21]"),
            ("1e999", "null"),
        ],
    )
    def test_numbers_serialize_like_javascript(self, text, expected):
        assert derive_message(text) == expected

    def test_non_standard_constants_left_as_text(self):
        assert derive_message("NaN") == "NaN"
        assert derive_message('{"message": Infinity}') == '{"message": Infinity}'


def test_dump_json_is_compact_and_keeps_unicode():
    assert dump_json({"a": [1, "é"]}) == '{"a":[1,"é"]}'


def test_dump_json_refuses_nan():
    with pytest.raises(ValueError):
        dump_json(float("nan"))
