"""Conversion of textual cell values into typed scalars."""

import logging
import re
from typing import Callable, Dict, Optional, Tuple

from ..errors import ConversionError
from ..models import Scalar, TypedValue
from ..types import ColumnType, ValueKind

logger = logging.getLogger("bda-mcp.query.coercion")

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Declared integer type -> (kind, bit size)
_INTEGER_TYPES: Dict[str, Tuple[ValueKind, int]] = {
    ColumnType.TINYINT.value: (ValueKind.INT8, 8),
    ColumnType.SMALLINT.value: (ValueKind.INT16, 16),
    ColumnType.INTEGER.value: (ValueKind.INT32, 32),
    ColumnType.BIGINT.value: (ValueKind.INT64, 64),
}

_TRUE_LITERALS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_LITERALS = {"0", "f", "F", "FALSE", "false", "False"}


def _parse_int(text: str, bits: int) -> int:
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ValueError(f"invalid integer literal '{text}'")
    value = int(text)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise ValueError(f"'{text}' is out of range for a {bits}-bit integer")
    return value


def _parse_double(text: str) -> float:
    # float() tolerates surrounding whitespace, digit separators and non-ASCII digits
    if not text or not text.isascii() or text != text.strip() or "_" in text:
        raise ValueError(f"invalid floating point literal '{text}'")
    return float(text)


def _parse_bool(text: str) -> bool:
    if text in _TRUE_LITERALS:
        return True
    if text in _FALSE_LITERALS:
        return False
    raise ValueError(f"invalid boolean literal '{text}'")


def _convert(
    declared_type: str,
    text: str,
    parser: Callable[[str], Scalar],
    kind: ValueKind,
    zero: Scalar,
    strict: bool,
) -> TypedValue:
    try:
        return TypedValue(kind, parser(text))
    except ValueError as e:
        if strict:
            raise ConversionError(f"Cannot convert value to {declared_type}: {str(e)}") from e
        logger.warning(f"Cannot convert value to {declared_type} ({str(e)}), using {zero!r}")
        return TypedValue(kind, zero)


def coerce(declared_type: str, text: Optional[str], strict: bool = False) -> TypedValue:
    """Convert the textual value of a cell according to its declared column type.

    Args:
        declared_type: Type name from the result set metadata (case-insensitive)
        text: Raw cell text, None when the cell has no value
        strict: Raise ConversionError on malformed literals instead of using the zero value

    Returns:
        TypedValue tagged with the kind of the declared type. Types without a
        dedicated conversion (varchar, date, timestamp and unknown types) are
        passed through as text.

    Raises:
        ConversionError: If strict is set and the literal is malformed or out of range
    """
    if text is None:
        return TypedValue.null()

    type_name = (declared_type or "").strip().lower()

    if type_name in _INTEGER_TYPES:
        kind, bits = _INTEGER_TYPES[type_name]
        return _convert(type_name, text, lambda t: _parse_int(t, bits), kind, 0, strict)
    if type_name == ColumnType.DOUBLE.value:
        return _convert(type_name, text, _parse_double, ValueKind.DOUBLE, 0.0, strict)
    if type_name == ColumnType.BOOLEAN.value:
        return _convert(type_name, text, _parse_bool, ValueKind.BOOL, False, strict)

    return TypedValue(ValueKind.TEXT, text)
