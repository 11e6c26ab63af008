import pytest

import json_parser as jp
from json_convert import Target
from json_errors import JsonError, ParseError
from json_value import JsonArray, JsonObject


def test_extra_data_reports_position():
    with pytest.raises(ParseError) as ei:
        jp.parse('[1] 2')
    assert ei.value.kind == "trailing_data"
    assert "expected end of input" in str(ei.value)
    assert (ei.value.row, ei.value.column) == (1, 5)


@pytest.mark.parametrize("text", ['"hello"', "42", "true", "null", ""])
def test_root_must_be_object_or_array(text):
    with pytest.raises(ParseError) as ei:
        jp.parse(text)
    assert ei.value.expected == "'{' or '['"


def test_parse_error_is_a_syntax_error():
    with pytest.raises(SyntaxError):
        jp.parse("[")
    with pytest.raises(JsonError):
        jp.parse("[")


def test_empty_collections():
    assert jp.parse("{}") == JsonObject({})
    assert jp.parse("[]") == JsonArray(())
    assert jp.parse(" [ ] ").values() == ()
    assert jp.parse("{ }").keys() == frozenset()


def test_duplicate_keys_keep_last_value():
    doc = jp.parse('{"a":1,"a":2}')
    assert doc.get("a").convert(Target.INT32) == 2
    assert doc.keys() == {"a"}


def test_duplicate_keys_rejected_on_request():
    with pytest.raises(ParseError) as ei:
        jp.parse('{"a":1,\n "a":2}', reject_duplicate_keys=True)
    assert ei.value.kind == "duplicate_key"
    assert ei.value.actual == "a"
    assert (ei.value.row, ei.value.column) == (2, 2)


def test_missing_comma_in_object_reports_expected():
    with pytest.raises(ParseError) as ei:
        jp.parse('{"a":1 "b":2}')
    assert "expected ',' or '}'" in str(ei.value)


def test_missing_closing_bracket_in_array():
    with pytest.raises(ParseError) as ei:
        jp.parse('[1,2')
    assert ei.value.actual == ""
    assert ei.value.expected == "',' or ']'"


def test_trailing_comma_in_object_is_unexpected_character():
    with pytest.raises(ParseError) as ei:
        jp.parse('{"a":1,}')
    assert ei.value.kind == "unexpected_character"
    assert ei.value.actual == "}"


def test_trailing_comma_in_array_is_unexpected_character():
    with pytest.raises(ParseError) as ei:
        jp.parse('[1,]')
    assert ei.value.kind == "unexpected_character"
    assert ei.value.actual == "]"


def test_misspelled_keyword_fails_on_first_wrong_character():
    with pytest.raises(ParseError) as ei:
        jp.parse('[tru]')
    assert ei.value.expected == "'e'"
    assert ei.value.actual == "]"


def test_whitespace_allowed_between_every_token():
    doc = jp.parse(' \n\t{ "a" : [ 1 , 2 ] ,\r\n "b" : null }\r\n ')
    assert doc.get("a").convert([int]) == (1, 2)
    assert doc.get("b").convert(Target.STRING) is None


def test_error_position_counts_rows_and_columns():
    with pytest.raises(ParseError) as ei:
        jp.parse('{\n  "a": x\n}')
    assert (ei.value.row, ei.value.column) == (2, 8)
    assert ei.value.actual == "x"


def test_depth_limit_is_configurable():
    nested = "[" * 10 + "]" * 10
    assert jp.parse(nested, max_depth=10).get(*["0"] * 9) == JsonArray(())
    with pytest.raises(ParseError) as ei:
        jp.parse(nested, max_depth=5)
    assert ei.value.kind == "depth_limit"


def test_default_depth_limit_stops_runaway_nesting():
    with pytest.raises(ParseError) as ei:
        jp.parse("[" * 5000 + "]" * 5000)
    assert ei.value.kind == "depth_limit"
    assert ei.value.column == jp.DEPTH_LIMIT_DEFAULT + 1
