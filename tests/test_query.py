"""Tests for query string parsing and re-encoding."""

from core.query import (
    append_query,
    encode_query,
    first_value,
    group_pairs,
    parse_raw_query,
    without_reserved,
)


class TestParseRawQuery:
    """Tests for parse_raw_query."""

    def test_repeated_key_accumulates_in_order(self):
        assert parse_raw_query("a=1&a=2") == {"a": ["1", "2"]}

    def test_repeated_key_reencodes_in_order(self):
        assert encode_query(parse_raw_query("a=1&a=2")) == "a=1&a=2"

    def test_key_without_equals_maps_to_empty_string(self):
        assert parse_raw_query("flag&x=1") == {"flag": "", "x": "1"}

    def test_splits_on_first_equals_only(self):
        assert parse_raw_query("expr=a=b") == {"expr": "a=b"}

    def test_percent_decodes_keys_and_values(self):
        assert parse_raw_query("na%20me=caf%C3%A9") == {"na me": "café"}

    def test_leading_question_mark_and_empty_parts(self):
        assert parse_raw_query("?a=1&&b=2&") == {"a": "1", "b": "2"}

    def test_empty_or_missing(self):
        assert parse_raw_query("") == {}
        assert parse_raw_query(None) == {}
        assert parse_raw_query("?") == {}


class TestEncodeQuery:
    """Tests for encode_query and append_query."""

    def test_percent_encodes_like_encode_uri_component(self):
        assert encode_query({"q": "a b&c/d", "x": "it's(ok)!"}) == "q=a%20b%26c%2Fd&x=it's(ok)!"

    def test_list_values_expand_to_repeated_pairs(self):
        assert encode_query({"a": ["1", "2"], "b": "3"}) == "a=1&a=2&b=3"

    def test_append_uses_question_mark(self):
        assert append_query("https://h/w", {"a": "1"}) == "https://h/w?a=1"

    def test_append_uses_ampersand_when_query_present(self):
        assert append_query("https://h/w?x=0", {"a": "1"}) == "https://h/w?x=0&a=1"

    def test_append_without_params_leaves_url_untouched(self):
        assert append_query("https://h/w", {}) == "https://h/w"


class TestReservedKey:
    """The path parameter is consumed for routing and never forwarded."""

    def test_path_removed(self):
        assert without_reserved({"path": "x", "a": "1"}) == {"a": "1"}

    def test_repeated_path_removed(self):
        params = parse_raw_query("path=x&a=1&path=y")
        assert "path" not in encode_query(without_reserved(params))
        assert encode_query(without_reserved(params)) == "a=1"

    def test_group_pairs(self):
        assert group_pairs([("a", "1"), ("b", "2"), ("a", "3")]) == {"a": ["1", "3"], "b": "2"}

    def test_first_value(self):
        assert first_value(["x", "y"]) == "x"
        assert first_value("x") == "x"
        assert first_value(None) == ""
        assert first_value([]) == ""
