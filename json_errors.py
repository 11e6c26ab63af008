# json_errors.py
# Typed error families raised by the JSON value library.
#
# Every error carries a machine-readable ``kind`` plus the context needed to
# branch on it. Each family also derives from the closest builtin so plain
# ``except SyntaxError`` / ``except LookupError`` / ``except ValueError``
# clauses keep working.
#
# Errors raised by the underlying text stream (OSError, UnicodeDecodeError)
# are never wrapped into these classes.

from typing import Any, Dict, Optional


class JsonError(Exception):
    """Base class for every error raised by this library."""

    kind: str = "json_error"

    def __init__(self, message: str = "", *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.details: Dict[str, Any] = details or {}


# ---------------------------------------------------------------------------
# SYNTAX
# ---------------------------------------------------------------------------
class ParseError(JsonError, SyntaxError):
    """
    Grammar violation found while reading JSON text.

    ``expected`` names the characters the grammar allowed at this point,
    ``actual`` is the character found ("" at end of input) and ``row`` /
    ``column`` locate it (both 1-based, rows advance on newline).
    """

    kind = "unexpected_character"

    def __init__(self, expected: str, actual: str, row: int, column: int, *, kind: Optional[str] = None) -> None:
        shown = repr(actual) if actual else "end of input"
        super().__init__(
            f"expected {expected}, got {shown} at row {row}, column {column}",
            details={"expected": expected, "actual": actual, "row": row, "column": column},
        )
        if kind is not None:
            self.kind = kind
        self.expected = expected
        self.actual = actual
        self.row = row
        self.column = column


# ---------------------------------------------------------------------------
# NAVIGATION
# ---------------------------------------------------------------------------
class JsonLookupError(JsonError, LookupError):
    """A path segment could not be resolved against a node."""

    kind = "lookup_error"

    def __init__(self, message: str, *, segment: Any = None) -> None:
        super().__init__(message, details={"segment": segment})
        self.segment = segment


class KeyNotFoundError(JsonLookupError):
    kind = "key_not_found"


class IndexOutOfRangeError(JsonLookupError):
    kind = "index_out_of_range"


class NotAContainerError(JsonLookupError, TypeError):
    """Children were requested from a String, Number, Boolean or Null node."""

    kind = "type_mismatch"


# ---------------------------------------------------------------------------
# CONVERSION
# ---------------------------------------------------------------------------
class ConversionError(JsonError, ValueError):
    """A node could not be projected into the requested target."""

    kind = "conversion_error"

    def __init__(self, message: str, *, source: Any = None, target: Any = None) -> None:
        super().__init__(message, details={"source": source, "target": target})
        self.source = source
        self.target = target


class UnsupportedConversionError(ConversionError, TypeError):
    """The (source kind, target) pair is not part of the coercion table."""

    kind = "type_mismatch"


class NumericOverflowError(ConversionError, OverflowError):
    kind = "numeric_overflow"


class LiteralFormatError(ConversionError):
    """A string source is not a valid literal for the requested target."""

    kind = "format_error"


# ---------------------------------------------------------------------------
# MISUSE / INTERNAL
# ---------------------------------------------------------------------------
class InvalidArgumentError(JsonError, ValueError):
    kind = "invalid_argument"


class InvalidStateError(JsonError, RuntimeError):
    """Internal invariant broken; never expected for library-built values."""

    kind = "invalid_state"


__all__ = [
    "JsonError",
    "ParseError",
    "JsonLookupError",
    "KeyNotFoundError",
    "IndexOutOfRangeError",
    "NotAContainerError",
    "ConversionError",
    "UnsupportedConversionError",
    "NumericOverflowError",
    "LiteralFormatError",
    "InvalidArgumentError",
    "InvalidStateError",
]
