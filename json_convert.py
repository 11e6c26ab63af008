# json_convert.py
# Typed extraction: project a JsonValue into a requested target kind.
#
# =============================================================================
#  COERCION TABLE
# =============================================================================
#
# Targets form a closed set (Target members plus ArrayOf(element)). Every
# legal (source kind, target) pair has exactly one entry in _CONVERSIONS;
# a pair missing from the table is a type mismatch, never a guess.
#
#   * Null converts to None for every scalar target.
#   * Fixed-width integer targets truncate number sources toward zero and
#     then wrap to the target width; string sources must fit or they raise
#     NumericOverflowError.
#   * ArrayOf(T) converts each of the node's values() to T and returns a
#     tuple, so the source must be an object or an array.
# =============================================================================

import enum
import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional, Tuple, Union

from json_errors import LiteralFormatError, NumericOverflowError, UnsupportedConversionError
from json_value import JsonType, JsonValue, NumberWidth, integer_bounds, integer_from_literal, number_literal

# ---------------------------------------------------------------------------
# TARGET KINDS
# ---------------------------------------------------------------------------
class Target(enum.Enum):
    BOOLEAN = "boolean"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    BIG_INTEGER = "big_integer"
    DECIMAL = "decimal"
    NUMBER = "number"
    FLOAT = "float"
    CHARACTER = "character"
    STRING = "string"

    @property
    def width(self) -> Optional[NumberWidth]:
        """Fixed storage width of an integer target, None for the others."""
        return _FIXED_WIDTHS.get(self)


_FIXED_WIDTHS = {
    Target.INT8: NumberWidth.INT8,
    Target.INT16: NumberWidth.INT16,
    Target.INT32: NumberWidth.INT32,
    Target.INT64: NumberWidth.INT64,
}

# Python types accepted as shorthand for a Target
_ALIASES = {
    bool: Target.BOOLEAN,
    int: Target.BIG_INTEGER,
    float: Target.FLOAT,
    str: Target.STRING,
    Decimal: Target.DECIMAL,
}


@dataclass(frozen=True)
class ArrayOf:
    """Array target: every child converted to ``element``."""

    element: Union[Target, "ArrayOf"]

    def __post_init__(self) -> None:
        object.__setattr__(self, "element", resolve_target(self.element))


TargetSpec = Union[Target, ArrayOf]


def resolve_target(spec: Any) -> TargetSpec:
    """
    Normalise a target descriptor.

    Accepts a Target, an ArrayOf, one of bool/int/float/str/Decimal, or a
    one-element list ``[t]`` meaning ArrayOf(t).
    """
    if isinstance(spec, (Target, ArrayOf)):
        return spec
    if isinstance(spec, list) and len(spec) == 1:
        return ArrayOf(spec[0])
    if isinstance(spec, type) and spec in _ALIASES:
        return _ALIASES[spec]
    raise UnsupportedConversionError(f"{spec!r} is not a conversion target", target=spec)


# ---------------------------------------------------------------------------
# LITERAL GRAMMARS FOR STRING SOURCES
# ---------------------------------------------------------------------------
_INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")
_DECIMAL_LITERAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _bad_literal(text: str, target: Target) -> LiteralFormatError:
    return LiteralFormatError(
        f"{text!r} is not a valid {target.value} literal", source=text, target=target
    )


def _too_large(source: Any, target: Target) -> NumericOverflowError:
    return NumericOverflowError(
        f"{source} does not fit in a {target.value}", source=source, target=target
    )


def _wrap(value: int, width: NumberWidth) -> int:
    low, _ = integer_bounds(width)
    return (value - low) % (1 << width.bits) + low


# ---------------------------------------------------------------------------
# STRING SOURCE
# ---------------------------------------------------------------------------
def _string_to_boolean(text: str, target: Target) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise _bad_literal(text, target)


def _string_to_integer(text: str, target: Target) -> int:
    if not _INTEGER_LITERAL.fullmatch(text):
        raise _bad_literal(text, target)
    value = integer_from_literal(text)
    width = target.width
    if width is not None:
        low, high = integer_bounds(width)
        if not low <= value <= high:
            raise NumericOverflowError(
                f"{text} does not fit in {width.value}", source=text, target=target
            )
    return value


def _string_to_decimal(text: str, target: Target) -> Decimal:
    if not _DECIMAL_LITERAL.fullmatch(text):
        raise _bad_literal(text, target)
    try:
        return Decimal(text)
    except InvalidOperation:
        raise _too_large(text, target) from None


def _string_to_float(text: str, target: Target) -> float:
    if not _DECIMAL_LITERAL.fullmatch(text):
        raise _bad_literal(text, target)
    result = float(text)
    if math.isinf(result):
        raise _too_large(text, target)
    return result


def _string_to_character(text: str, target: Target) -> str:
    if not text:
        raise _bad_literal(text, target)
    return text[0]


def _same(payload: Any, target: Target) -> Any:
    return payload


# ---------------------------------------------------------------------------
# NUMBER SOURCE
# ---------------------------------------------------------------------------
def _number_to_boolean(number: Union[int, Decimal], target: Target) -> bool:
    return number != 0


def _number_to_fixed(number: Union[int, Decimal], target: Target) -> int:
    return _wrap(int(number), target.width)


def _number_to_big_integer(number: Union[int, Decimal], target: Target) -> int:
    # int() drops the fraction toward zero
    return int(number)


def _number_to_decimal(number: Union[int, Decimal], target: Target) -> Decimal:
    return Decimal(number)


def _number_to_float(number: Union[int, Decimal], target: Target) -> float:
    # int payloads raise OverflowError, Decimal payloads round to inf
    try:
        result = float(number)
    except OverflowError:
        raise _too_large(number_literal(number), target) from None
    if math.isinf(result):
        raise _too_large(number_literal(number), target)
    return result


def _number_to_string(number: Union[int, Decimal], target: Target) -> str:
    return number_literal(number)


# ---------------------------------------------------------------------------
# BOOLEAN SOURCE
# ---------------------------------------------------------------------------
def _boolean_to_integer(flag: bool, target: Target) -> int:
    return 1 if flag else 0


def _boolean_to_decimal(flag: bool, target: Target) -> Decimal:
    return Decimal(1) if flag else Decimal(0)


def _boolean_to_float(flag: bool, target: Target) -> float:
    return 1.0 if flag else 0.0


def _boolean_to_character(flag: bool, target: Target) -> str:
    return "t" if flag else "f"


def _boolean_to_string(flag: bool, target: Target) -> str:
    return "true" if flag else "false"


# ---------------------------------------------------------------------------
# DISPATCH TABLE
# ---------------------------------------------------------------------------
Converter = Callable[[Any, Target], Any]

_CONVERSIONS: Dict[Tuple[JsonType, Target], Converter] = {
    (JsonType.STRING, Target.BOOLEAN): _string_to_boolean,
    (JsonType.STRING, Target.INT8): _string_to_integer,
    (JsonType.STRING, Target.INT16): _string_to_integer,
    (JsonType.STRING, Target.INT32): _string_to_integer,
    (JsonType.STRING, Target.INT64): _string_to_integer,
    (JsonType.STRING, Target.BIG_INTEGER): _string_to_integer,
    (JsonType.STRING, Target.DECIMAL): _string_to_decimal,
    (JsonType.STRING, Target.NUMBER): _string_to_decimal,
    (JsonType.STRING, Target.FLOAT): _string_to_float,
    (JsonType.STRING, Target.CHARACTER): _string_to_character,
    (JsonType.STRING, Target.STRING): _same,

    (JsonType.NUMBER, Target.BOOLEAN): _number_to_boolean,
    (JsonType.NUMBER, Target.INT8): _number_to_fixed,
    (JsonType.NUMBER, Target.INT16): _number_to_fixed,
    (JsonType.NUMBER, Target.INT32): _number_to_fixed,
    (JsonType.NUMBER, Target.INT64): _number_to_fixed,
    (JsonType.NUMBER, Target.BIG_INTEGER): _number_to_big_integer,
    (JsonType.NUMBER, Target.DECIMAL): _number_to_decimal,
    (JsonType.NUMBER, Target.NUMBER): _same,
    (JsonType.NUMBER, Target.FLOAT): _number_to_float,
    (JsonType.NUMBER, Target.STRING): _number_to_string,

    (JsonType.BOOLEAN, Target.BOOLEAN): _same,
    (JsonType.BOOLEAN, Target.INT8): _boolean_to_integer,
    (JsonType.BOOLEAN, Target.INT16): _boolean_to_integer,
    (JsonType.BOOLEAN, Target.INT32): _boolean_to_integer,
    (JsonType.BOOLEAN, Target.INT64): _boolean_to_integer,
    (JsonType.BOOLEAN, Target.BIG_INTEGER): _boolean_to_integer,
    (JsonType.BOOLEAN, Target.DECIMAL): _boolean_to_decimal,
    (JsonType.BOOLEAN, Target.NUMBER): _boolean_to_decimal,
    (JsonType.BOOLEAN, Target.FLOAT): _boolean_to_float,
    (JsonType.BOOLEAN, Target.CHARACTER): _boolean_to_character,
    (JsonType.BOOLEAN, Target.STRING): _boolean_to_string,
}


# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def convert(node: JsonValue, target: Any) -> Any:
    """
    Convert ``node`` to ``target``.

    Returns None for a null node and any scalar target. Raises
    UnsupportedConversionError when the pair is not in the table (including
    an ArrayOf target on a scalar or null node), NumericOverflowError or
    LiteralFormatError when a value cannot be represented.
    """
    spec = resolve_target(target)
    if isinstance(spec, ArrayOf):
        if not node.is_structure:
            raise UnsupportedConversionError(
                f"cannot convert a {node.type.value} value to an array",
                source=node.type,
                target=spec,
            )
        return tuple(convert(child, spec.element) for child in node.values())

    kind = node.type
    if kind is JsonType.NULL:
        return None
    try:
        converter = _CONVERSIONS[(kind, spec)]
    except KeyError:
        raise UnsupportedConversionError(
            f"cannot convert a {kind.value} value to {spec.value}", source=kind, target=spec
        ) from None
    return converter(node.value, spec)


__all__ = ["Target", "ArrayOf", "TargetSpec", "resolve_target", "convert"]
