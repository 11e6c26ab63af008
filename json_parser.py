# json_parser.py
# Character-level JSON reader producing json_value trees.
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT OVER A CHARACTER STREAM
# =============================================================================
#
# One method per grammar element, dispatched on a single character of
# lookahead. The reader pulls characters one at a time from any text stream
# with read(1), so a document never has to be held in memory as a whole.
#
# Design notes:
# 1. JSON is LL(1): the first non-whitespace character decides the
#    production, so the LookAhead slot is the only buffered state.
# 2. Row/column counters follow the lookahead character. Rows are line
#    numbers starting at 1; a newline bumps the row and resets the column.
# 3. Numbers are kept exact. Whole literals become int narrowed to the
#    smallest signed width; a fraction or exponent gives a Decimal.
# 4. The root must be an object or an array. Nesting deeper than max_depth
#    is refused before the interpreter stack runs out.
# 5. Every grammar violation raises ParseError at the first bad character.
#    Errors raised by the stream itself propagate untouched.
# =============================================================================

import io
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, List, Optional, TextIO, Tuple

from json_errors import ParseError
from json_value import (FALSE, NULL, TRUE, JsonArray, JsonNumber, JsonObject, JsonString, JsonValue, NumberWidth,
                        integer_from_literal)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 256    # Two frames per level keeps this under the default recursion limit

WHITESPACE = frozenset(" \t\n\r")
DIGITS = frozenset("0123456789")
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_EXPECT_VALUE = "'{', '[', '\"', 't', 'f', 'n', '-' or DIGIT"
_EXPECT_ROOT = "'{' or '['"

# ---------------------------------------------------------------------------
# LOOKAHEAD SLOT
# ---------------------------------------------------------------------------
class LookAhead:
    """
    One-character pushback over a text stream.

    ``current`` is the next unread character ("" once the stream is
    exhausted); ``row`` and ``column`` locate it.
    """

    def __init__(self, stream: TextIO):
        self._stream = stream
        self.row = 1
        self.column = 1
        self.current = stream.read(1)

    def peek(self) -> str:
        return self.current

    def pop(self) -> str:
        previous = self.current
        if not previous:
            return previous
        self.current = self._stream.read(1)
        if previous == "\n":
            self.row += 1
            self.column = 1
        else:
            self.column += 1
        return previous


# ---------------------------------------------------------------------------
# READER
# ---------------------------------------------------------------------------
class JsonReader:
    """
    Reads JSON documents from a text stream.

    ``read`` returns one document and keeps the lookahead, so a stream holding
    several concatenated documents can be consumed by iterating the reader.
    Duplicate object keys keep the last value unless reject_duplicate_keys
    is set.
    """

    def __init__(
        self,
        stream: TextIO,
        *,
        max_depth: int = DEPTH_LIMIT_DEFAULT,
        reject_duplicate_keys: bool = False,
    ):
        self._chars = LookAhead(stream)
        self._max_depth = max_depth
        self._reject_duplicate_keys = reject_duplicate_keys
        self._depth = 0

    def __iter__(self) -> Iterator[JsonValue]:
        while not self.at_end():
            yield self.read()

    @property
    def position(self) -> Tuple[int, int]:
        """(row, column) of the next unread character."""
        return self._chars.row, self._chars.column

    def read(self) -> JsonValue:
        """Read one object or array; any other root is a ParseError."""
        self._skip_whitespace()
        ch = self._chars.peek()
        if ch == "{":
            value: JsonValue = self._read_object()
        elif ch == "[":
            value = self._read_array()
        else:
            raise self._unexpected(_EXPECT_ROOT)
        logger.debug("read %s document, next character at row %d, column %d", value.type.value, *self.position)
        return value

    def at_end(self) -> bool:
        self._skip_whitespace()
        return not self._chars.peek()

    def expect_end(self) -> None:
        """Fail unless only whitespace remains."""
        if not self.at_end():
            raise self._unexpected("end of input", kind="trailing_data")

    # -- helpers -------------------------------------------------------------
    def _unexpected(self, expected: str, *, kind: Optional[str] = None) -> ParseError:
        error = ParseError(expected, self._chars.peek(), self._chars.row, self._chars.column, kind=kind)
        logger.debug("parse failed: %s", error)
        return error

    def _check(self, expected: str) -> None:
        if self._chars.peek() != expected:
            raise self._unexpected(f"'{expected}'")
        self._chars.pop()

    def _skip_whitespace(self) -> None:
        while self._chars.peek() in WHITESPACE:
            self._chars.pop()

    def _enter(self) -> None:
        if self._depth >= self._max_depth:
            raise self._unexpected(f"at most {self._max_depth} levels of nesting", kind="depth_limit")
        self._depth += 1

    # -- productions ---------------------------------------------------------
    def _read_value(self) -> JsonValue:
        self._skip_whitespace()
        ch = self._chars.peek()
        if ch == "{":
            return self._read_object()
        if ch == "[":
            return self._read_array()
        if ch == '"':
            return JsonString(self._read_string())
        if ch == "t":
            return self._read_keyword("true", TRUE)
        if ch == "f":
            return self._read_keyword("false", FALSE)
        if ch == "n":
            return self._read_keyword("null", NULL)
        if ch == "-" or ch in DIGITS:
            return self._read_number()
        raise self._unexpected(_EXPECT_VALUE)

    def _read_object(self) -> JsonObject:
        self._enter()
        try:
            self._check("{")
            members: Dict[str, JsonValue] = {}
            self._skip_whitespace()
            if self._chars.peek() == "}":
                self._chars.pop()
                return JsonObject(members)
            while True:
                self._skip_whitespace()
                row, column = self.position
                key = self._read_string()
                if self._reject_duplicate_keys and key in members:
                    raise ParseError("a unique key", key, row, column, kind="duplicate_key")
                self._skip_whitespace()
                self._check(":")
                members[key] = self._read_value()
                self._skip_whitespace()
                if self._chars.peek() == ",":
                    self._chars.pop()
                elif self._chars.peek() == "}":
                    self._chars.pop()
                    return JsonObject(members)
                else:
                    raise self._unexpected("',' or '}'")
        finally:
            self._depth -= 1

    def _read_array(self) -> JsonArray:
        self._enter()
        try:
            self._check("[")
            elements: List[JsonValue] = []
            self._skip_whitespace()
            if self._chars.peek() == "]":
                self._chars.pop()
                return JsonArray(elements)
            while True:
                elements.append(self._read_value())
                self._skip_whitespace()
                if self._chars.peek() == ",":
                    self._chars.pop()
                elif self._chars.peek() == "]":
                    self._chars.pop()
                    return JsonArray(elements)
                else:
                    raise self._unexpected("',' or ']'")
        finally:
            self._depth -= 1

    def _read_string(self) -> str:
        self._check('"')
        parts: List[str] = []
        while True:
            ch = self._chars.peek()
            if ch == '"':
                self._chars.pop()
                return "".join(parts)
            if not ch:
                raise self._unexpected("'\"'")
            if ch == "\\":
                self._chars.pop()
                parts.append(self._read_escape())
            else:
                parts.append(self._chars.pop())

    def _read_escape(self) -> str:
        """
        Decode the escape after a backslash.

        A high surrogate written as \\uXXXX and directly followed by a low
        surrogate escape is joined into one code point. Unpaired surrogates
        are kept as they are.
        """
        ch = self._chars.peek()
        if ch in _SIMPLE_ESCAPES:
            self._chars.pop()
            return _SIMPLE_ESCAPES[ch]
        if ch != "u":
            raise self._unexpected("one of '\"', '\\', '/', 'b', 'f', 'n', 'r', 't' or 'u'")
        self._chars.pop()
        unit = self._read_hex_quad()
        decoded = ""
        while 0xD800 <= unit <= 0xDBFF and self._chars.peek() == "\\":
            self._chars.pop()
            if self._chars.peek() != "u":
                return decoded + chr(unit) + self._read_escape()
            self._chars.pop()
            low = self._read_hex_quad()
            if 0xDC00 <= low <= 0xDFFF:
                return decoded + chr(0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00))
            # another high surrogate may still pair with what follows
            decoded += chr(unit)
            unit = low
        return decoded + chr(unit)

    def _read_hex_quad(self) -> int:
        unit = 0
        for _ in range(4):
            if self._chars.peek() not in HEX_DIGITS:
                raise self._unexpected("HEX DIGIT")
            unit = (unit << 4) | int(self._chars.pop(), 16)
        return unit

    def _read_number(self) -> JsonNumber:
        row, column = self.position
        text: List[str] = []
        is_whole = True
        if self._chars.peek() == "-":
            text.append(self._chars.pop())
        self._read_digits(text)
        if self._chars.peek() == ".":
            is_whole = False
            text.append(self._chars.pop())
            self._read_digits(text)
        if self._chars.peek() in ("e", "E"):
            is_whole = False
            text.append(self._chars.pop())
            if self._chars.peek() in ("+", "-"):
                text.append(self._chars.pop())
            self._read_digits(text)
        literal = "".join(text)
        try:
            if not is_whole:
                return JsonNumber(Decimal(literal), NumberWidth.DECIMAL)
            return JsonNumber.of(integer_from_literal(literal))
        except InvalidOperation:
            # exponent beyond what Decimal can hold
            error = ParseError("an exponent within the decimal range", literal, row, column,
                               kind="number_out_of_range")
            logger.debug("parse failed: %s", error)
            raise error from None

    def _read_digits(self, text: List[str]) -> None:
        if self._chars.peek() not in DIGITS:
            raise self._unexpected("DIGIT")
        while self._chars.peek() in DIGITS:
            text.append(self._chars.pop())

    def _read_keyword(self, word: str, value: JsonValue) -> JsonValue:
        for expected in word:
            self._check(expected)
        return value


# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def load(
    stream: TextIO,
    *,
    max_depth: int = DEPTH_LIMIT_DEFAULT,
    reject_duplicate_keys: bool = False,
) -> JsonValue:
    """
    Read exactly one document from ``stream``.

    Only whitespace may follow the root value; anything else is a ParseError
    of kind "trailing_data".
    """
    reader = JsonReader(stream, max_depth=max_depth, reject_duplicate_keys=reject_duplicate_keys)
    value = reader.read()
    reader.expect_end()
    return value


def parse(
    text: str,
    *,
    max_depth: int = DEPTH_LIMIT_DEFAULT,
    reject_duplicate_keys: bool = False,
) -> JsonValue:
    """Parse a complete JSON document held in a string."""
    return load(io.StringIO(text), max_depth=max_depth, reject_duplicate_keys=reject_duplicate_keys)


__all__ = ["DEPTH_LIMIT_DEFAULT", "LookAhead", "JsonReader", "load", "parse"]
