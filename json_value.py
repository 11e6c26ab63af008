# json_value.py
# In-memory value model for JSON documents.
#
# =============================================================================
#  VALUE MODEL: ONE FROZEN DATACLASS PER JSON KIND
# =============================================================================
#
# A document is a finite tree of JsonValue nodes. The six JSON kinds are a
# closed set of subclasses; each node is immutable once built, so a tree can
# be handed to several readers without copying or locking.
#
# Numbers keep the exact payload found in the text: integers remember the
# narrowest signed width that holds them, anything with a fraction or an
# exponent is a decimal.Decimal. Binary floats never enter the tree.
# =============================================================================

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional, Tuple, Union

from json_errors import (
    IndexOutOfRangeError,
    InvalidArgumentError,
    InvalidStateError,
    KeyNotFoundError,
    NotAContainerError,
)

# ---------------------------------------------------------------------------
# KIND TAGS
# ---------------------------------------------------------------------------
class JsonType(enum.Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


class NumberWidth(enum.Enum):
    """Storage class of a number payload, narrowest first."""

    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    BIG_INTEGER = "big_integer"
    DECIMAL = "decimal"

    @property
    def bits(self) -> Optional[int]:
        return _BITS.get(self)


_BITS = {
    NumberWidth.INT8: 8,
    NumberWidth.INT16: 16,
    NumberWidth.INT32: 32,
    NumberWidth.INT64: 64,
}

NumberPayload = Union[int, Decimal]
PathSegment = Union[str, int]


def integer_bounds(width: NumberWidth) -> Tuple[int, int]:
    """Inclusive (min, max) of a fixed signed width."""
    bits = width.bits
    if bits is None:
        raise InvalidArgumentError(f"{width.name} has no fixed bounds")
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def narrowest_width(value: int) -> NumberWidth:
    """
    Pick the smallest signed width that holds ``value`` exactly.

    Tried in order INT8, INT16, INT32, INT64; anything larger is kept as an
    unbounded integer.
    """
    for width in (NumberWidth.INT8, NumberWidth.INT16, NumberWidth.INT32, NumberWidth.INT64):
        low, high = integer_bounds(width)
        if low <= value <= high:
            return width
    return NumberWidth.BIG_INTEGER


def integer_from_literal(literal: str) -> int:
    """
    Exact int for a literal of optional sign and decimal digits.

    Goes through Decimal, which has no cap on the number of digits.
    """
    return int(Decimal(literal))


def number_literal(payload: NumberPayload) -> str:
    """JSON text of an exact number payload, free of the int digit cap."""
    if isinstance(payload, int):
        return str(Decimal(payload))
    return str(payload)


# ---------------------------------------------------------------------------
# BASE NODE
# ---------------------------------------------------------------------------
class JsonValue:
    """
    Common surface of every node.

    Scalars (string, number, boolean, null) have no children: ``get`` with a
    non-empty path, ``keys`` and ``values`` raise NotAContainerError on them.
    """

    __slots__ = ()

    _type: Optional[JsonType] = None

    @property
    def type(self) -> JsonType:
        kind = self.__class__._type
        if kind is None:
            raise InvalidStateError(f"{self.__class__.__name__} is not a JSON value kind")
        return kind

    @property
    def is_structure(self) -> bool:
        return self.type in (JsonType.OBJECT, JsonType.ARRAY)

    def get(self, *path: PathSegment) -> "JsonValue":
        """
        Walk ``path`` from this node.

        Object nodes take the segment as a string key, array nodes as a
        non-negative index (an int or a string of digits). An empty path
        returns the node itself.
        """
        node: JsonValue = self
        for segment in path:
            node = node._child(segment)
        return node

    def keys(self) -> FrozenSet[str]:
        raise self._not_a_container("keys")

    def values(self) -> Tuple["JsonValue", ...]:
        raise self._not_a_container("values")

    def convert(self, target: Any) -> Any:
        """Project this node into ``target``; see json_convert.convert."""
        from json_convert import convert

        return convert(self, target)

    def to_python(self) -> Any:
        raise InvalidStateError(f"{self.__class__.__name__} is not a JSON value kind")

    def _child(self, segment: PathSegment) -> "JsonValue":
        raise self._not_a_container(f"member {segment!r}", segment)

    def _not_a_container(self, what: str, segment: Any = None) -> NotAContainerError:
        return NotAContainerError(f"cannot read {what} of a {self.type.value} value", segment=segment)

    def __str__(self) -> str:
        from json_writer import to_text

        return to_text(self)


# ---------------------------------------------------------------------------
# SCALARS
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class JsonNull(JsonValue):
    _type = JsonType.NULL

    def to_python(self) -> None:
        return None


@dataclass(frozen=True)
class JsonBoolean(JsonValue):
    value: bool
    _type = JsonType.BOOLEAN

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class JsonString(JsonValue):
    value: str
    _type = JsonType.STRING

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class JsonNumber(JsonValue):
    """
    Exact number payload plus its storage width.

    Build through ``JsonNumber.of`` so the width always matches the payload.
    """

    value: NumberPayload
    width: NumberWidth
    _type = JsonType.NUMBER

    @classmethod
    def of(cls, value: NumberPayload) -> "JsonNumber":
        if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
            raise InvalidArgumentError(
                f"number payload must be int or Decimal, got {type(value).__name__}"
            )
        if isinstance(value, Decimal):
            if not value.is_finite():
                raise InvalidArgumentError(f"{value} has no JSON representation")
            return cls(value, NumberWidth.DECIMAL)
        return cls(value, narrowest_width(value))

    @property
    def is_integral(self) -> bool:
        return self.width is not NumberWidth.DECIMAL

    @property
    def literal(self) -> str:
        return number_literal(self.value)

    def to_python(self) -> NumberPayload:
        return self.value


# ---------------------------------------------------------------------------
# STRUCTURES
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class JsonArray(JsonValue):
    elements: Tuple[JsonValue, ...] = ()
    _type = JsonType.ARRAY

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))

    def keys(self) -> FrozenSet[str]:
        return frozenset(str(index) for index in range(len(self.elements)))

    def values(self) -> Tuple[JsonValue, ...]:
        return self.elements

    def to_python(self) -> list:
        return [element.to_python() for element in self.elements]

    def _child(self, segment: PathSegment) -> JsonValue:
        if isinstance(segment, str) and segment.isascii() and segment.isdigit():
            index = int(segment)
        elif isinstance(segment, int) and not isinstance(segment, bool):
            index = segment
        else:
            raise IndexOutOfRangeError(f"{segment!r} is not an array index", segment=segment)
        if not 0 <= index < len(self.elements):
            raise IndexOutOfRangeError(
                f"index {index} out of range for array of {len(self.elements)}", segment=segment
            )
        return self.elements[index]


@dataclass(frozen=True)
class JsonObject(JsonValue):
    """Keyed members. Iteration order follows the last write of each key."""

    members: Mapping[str, JsonValue] = field(default_factory=dict)
    _type = JsonType.OBJECT

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", MappingProxyType(dict(self.members)))

    def __hash__(self) -> int:
        return hash(frozenset(self.members.items()))

    def keys(self) -> FrozenSet[str]:
        return frozenset(self.members)

    def values(self) -> Tuple[JsonValue, ...]:
        return tuple(self.members.values())

    def items(self) -> Tuple[Tuple[str, JsonValue], ...]:
        """(key, value) pairs in the order ``values`` reports them."""
        return tuple(self.members.items())

    def to_python(self) -> dict:
        return {key: value.to_python() for key, value in self.members.items()}

    def _child(self, segment: PathSegment) -> JsonValue:
        key = segment if isinstance(segment, str) else str(segment)
        try:
            return self.members[key]
        except KeyError:
            raise KeyNotFoundError(f"no member {key!r}", segment=segment) from None


NULL = JsonNull()
TRUE = JsonBoolean(True)
FALSE = JsonBoolean(False)


# ---------------------------------------------------------------------------
# EMBEDDING PLAIN PYTHON DATA
# ---------------------------------------------------------------------------
def from_python(obj: Any) -> JsonValue:
    """
    Build a tree from plain Python data.

    Accepts None, bool, int, Decimal, str, list/tuple and dicts keyed by str.
    Floats are refused; wrap them in Decimal first to choose the digits.
    """
    if obj is None:
        return NULL
    if isinstance(obj, JsonValue):
        return obj
    if isinstance(obj, bool):
        return TRUE if obj else FALSE
    if isinstance(obj, (int, Decimal)):
        return JsonNumber.of(obj)
    if isinstance(obj, str):
        return JsonString(obj)
    if isinstance(obj, (list, tuple)):
        return JsonArray(tuple(from_python(item) for item in obj))
    if isinstance(obj, dict):
        members = {}
        for key, value in obj.items():
            if not isinstance(key, str):
                raise InvalidArgumentError(f"object keys must be str, got {type(key).__name__}")
            members[key] = from_python(value)
        return JsonObject(members)
    raise InvalidArgumentError(f"{type(obj).__name__} has no JSON representation")


__all__ = [
    "JsonType",
    "NumberWidth",
    "JsonValue",
    "JsonNull",
    "JsonBoolean",
    "JsonString",
    "JsonNumber",
    "JsonArray",
    "JsonObject",
    "NULL",
    "TRUE",
    "FALSE",
    "integer_bounds",
    "narrowest_width",
    "integer_from_literal",
    "number_literal",
    "from_python",
]
