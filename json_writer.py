# json_writer.py
# Serialize json_value trees back to JSON text.
#
# Output layout is driven by three strings: the line break written before
# each member, the indent unit repeated once per nesting level, and the pad
# written after each ':'. All three empty gives compact output.
#
# Only objects and arrays may be written as a document root, the same rule
# the reader enforces.

import io
import logging
import re
from typing import NamedTuple, TextIO

from json_errors import InvalidArgumentError, InvalidStateError
from json_value import JsonType, JsonValue

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
class Layout(NamedTuple):
    line_break: str = ""
    indent: str = ""
    pad: str = ""


COMPACT = Layout()
PRETTY = Layout("\n", "  ", " ")

# ---------------------------------------------------------------------------
# STRING ESCAPING
# ---------------------------------------------------------------------------
# Named escapes win over the generic \u00xx form for the controls they cover.
_ESCAPES = {chr(code): f"\\u{code:04x}" for code in range(0x20)}
_ESCAPES.update({
    '"': '\\"',
    "\\": "\\\\",
    "/": "\\/",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
})

_ESCAPE_RE = re.compile(r'["\\/\x00-\x1f]')


def escape(text: str) -> str:
    """Escape ``text`` for use between double quotes."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group()], text)


# ---------------------------------------------------------------------------
# WRITER
# ---------------------------------------------------------------------------
class JsonWriter:
    """Writes documents to any text stream with write(str)."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def write(self, value: JsonValue, line_break: str = "", indent: str = "", pad: str = "") -> None:
        if not value.is_structure:
            raise InvalidArgumentError(
                f"only objects and arrays can be written as a document, got {value.type.value}"
            )
        self.write_value(value, line_break, indent, pad)
        logger.debug("wrote %s document", value.type.value)

    def write_value(self, value: JsonValue, line_break: str = "", indent: str = "", pad: str = "") -> None:
        """Write any node, scalars included, without the document root check."""
        self._write_value(value, 0, Layout(line_break, indent, pad))

    def _newline(self, level: int, layout: Layout) -> None:
        self._stream.write(layout.line_break + layout.indent * level)

    def _write_value(self, value: JsonValue, level: int, layout: Layout) -> None:
        kind = value.type
        out = self._stream
        if kind is JsonType.OBJECT:
            out.write("{")
            members = value.items()
            for position, (key, member) in enumerate(members, 1):
                self._newline(level + 1, layout)
                out.write('"' + escape(key) + '":' + layout.pad)
                self._write_value(member, level + 1, layout)
                if position < len(members):
                    out.write(",")
            self._newline(level, layout)
            out.write("}")
        elif kind is JsonType.ARRAY:
            out.write("[")
            elements = value.values()
            for position, element in enumerate(elements, 1):
                self._newline(level + 1, layout)
                self._write_value(element, level + 1, layout)
                if position < len(elements):
                    out.write(",")
            self._newline(level, layout)
            out.write("]")
        elif kind is JsonType.STRING:
            out.write('"' + escape(value.value) + '"')
        elif kind is JsonType.NUMBER:
            out.write(value.literal)
        elif kind is JsonType.BOOLEAN:
            out.write("true" if value.value else "false")
        elif kind is JsonType.NULL:
            out.write("null")
        else:
            raise InvalidStateError(f"unknown JSON kind {kind!r}")


# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def dump(value: JsonValue, stream: TextIO, line_break: str = "", indent: str = "", pad: str = "") -> None:
    JsonWriter(stream).write(value, line_break, indent, pad)


def write(value: JsonValue, line_break: str = "", indent: str = "", pad: str = "") -> str:
    """
    Render a document as a string.

    ``write(value)`` is compact; ``write(value, *PRETTY)`` indents by two
    spaces with one space after each colon.
    """
    buffer = io.StringIO()
    dump(value, buffer, line_break, indent, pad)
    return buffer.getvalue()


def to_text(value: JsonValue) -> str:
    """Compact text of any node, scalars included."""
    buffer = io.StringIO()
    JsonWriter(buffer).write_value(value, *COMPACT)
    return buffer.getvalue()


__all__ = ["Layout", "COMPACT", "PRETTY", "escape", "JsonWriter", "dump", "write", "to_text"]
