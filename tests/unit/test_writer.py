import io
import logging

import pytest

import json_parser as jp
import json_writer as jw
from json_errors import InvalidArgumentError
from json_value import NULL, TRUE, JsonNumber, JsonString, from_python

DOCUMENTS = [
    "{}",
    "[]",
    '{"a":[1,2.50,"x",true,false,null]}',
    '[[[]],{},{"":""}]',
    '{"n":[-128,128,2147483648,99999999999999999999,-0.0,1E+10,1.5E-7]}',
    '["quote \\" slash \\/ tab \\t nul \\u0000 bell \\u0007"]',
]


def test_compact_output_has_no_whitespace():
    doc = jp.parse('{ "a" : [ 1 , 2.50 , "x" , true , false , null ] }')
    assert jw.write(doc) == '{"a":[1,2.50,"x",true,false,null]}'


def test_pretty_layout():
    doc = jp.parse('{"a":[1,2],"b":{}}')
    assert jw.write(doc, *jw.PRETTY) == '{\n  "a": [\n    1,\n    2\n  ],\n  "b": {\n  }\n}'


def test_custom_layout_strings():
    doc = jp.parse('[1,{"k":true}]')
    assert jw.write(doc, "|", ".", "_") == '[|.1,|.{|..\"k\":_true|.}|]'


def test_empty_structures():
    assert jw.write(jp.parse("{}")) == "{}"
    assert jw.write(jp.parse("[]"), *jw.PRETTY) == "[\n]"


@pytest.mark.parametrize("node", [JsonString("x"), JsonNumber.of(1), TRUE, NULL])
def test_scalar_root_rejected(node):
    with pytest.raises(InvalidArgumentError) as ei:
        jw.write(node)
    assert ei.value.kind == "invalid_argument"
    assert isinstance(ei.value, ValueError)


def test_escape_table():
    raw = 'a"b\\c/d\b\f\n\r\t\x01\x1f'
    assert jw.escape(raw) == 'a\\"b\\\\c\\/d\\b\\f\\n\\r\\t\\u0001\\u001f'


def test_escape_leaves_other_characters_alone():
    assert jw.escape("caf\xe9 \U0001F600 \x7f") == "caf\xe9 \U0001F600 \x7f"


def test_numbers_are_written_from_exact_payload():
    doc = jp.parse("[1.10, 1e10, 0.000001, 12345678901234567890.5]")
    assert jw.write(doc) == "[1.10,1E+10,0.000001,12345678901234567890.5]"


def test_dump_writes_to_stream():
    buffer = io.StringIO()
    jw.dump(from_python({"k": [1, None]}), buffer, "", "", " ")
    assert buffer.getvalue() == '{"k": [1,null]}'


@pytest.mark.parametrize("text", DOCUMENTS)
def test_parse_write_round_trip(text):
    doc = jp.parse(text)
    assert jp.parse(jw.write(doc)) == doc


@pytest.mark.parametrize("text", DOCUMENTS)
def test_compact_write_is_idempotent(text):
    once = jw.write(jp.parse(text))
    assert jw.write(jp.parse(once)) == once


def test_writer_logs_completed_document(caplog):
    with caplog.at_level(logging.DEBUG, logger="json_writer"):
        jw.write(jp.parse("[1]"))
    assert "wrote array document" in caplog.text


def test_integers_beyond_the_int_digit_cap_are_written():
    assert jw.write(from_python([10 ** 5000])) == "[1" + "0" * 5000 + "]"
    text = "[-" + "7" * 4500 + "]"
    assert jw.write(jp.parse(text)) == text


def test_write_value_accepts_scalars():
    buffer = io.StringIO()
    writer = jw.JsonWriter(buffer)
    writer.write_value(JsonString("a/b"))
    writer.write_value(JsonNumber.of(12))
    writer.write_value(from_python({"k": [True]}), "\n", " ", " ")
    assert buffer.getvalue() == '"a\\/b"12{\n "k": [\n  true\n ]\n}'


def test_scalar_text_form():
    assert str(JsonString("x")) == '"x"'
    assert str(NULL) == "null"
