"""Decoding of raw result rows into typed rows."""

from typing import Dict, List, Optional, Sequence

from ..models import ColumnDescriptor, ResultRow, TypedValue
from .coercion import coerce


def decode_row(
    raw_row: Sequence[Optional[str]],
    columns: List[ColumnDescriptor],
    strict: bool = False,
) -> ResultRow:
    """Decode one raw row into a ResultRow keyed by column name.

    Cells missing from a short row decode to null, like cells without a value.

    Args:
        raw_row: Cell texts in column order
        columns: Column descriptors of the result set
        strict: Passed through to the type coercer

    Returns:
        ResultRow in column order
    """
    values: Dict[str, TypedValue] = {}
    for idx, column in enumerate(columns):
        text = raw_row[idx] if idx < len(raw_row) else None
        values[column.name] = coerce(column.type, text, strict=strict)
    return ResultRow(values)
