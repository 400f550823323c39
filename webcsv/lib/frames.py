"""Typed DataFrame conversion for validated records.

Validated records are plain strings. ``records_to_dataframe`` turns them
into a pandas DataFrame with one typed column per schema column.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Sequence

import pandas as pd

from webcsv.lib.schema import ColumnType
from webcsv.lib.validators import normalize_decimal, parse_bool_literal

if TYPE_CHECKING:
    from webcsv.lib.schema import ColumnSpec, SchemaSpec

logger = logging.getLogger(__name__)

__all__ = ["records_to_dataframe", "frame_column_names"]


def frame_column_names(schema: "SchemaSpec") -> List[str]:
    """Column labels for a schema; unnamed columns become ``column_<i>``."""
    return [c.name or f"column_{i}" for i, c in enumerate(schema.columns)]


def _convert(values: pd.Series, column: "ColumnSpec") -> pd.Series:
    if column.type == ColumnType.INT.value:
        return values.map(int).astype("Int64")
    if column.type == ColumnType.BOOL.value:
        return values.map(parse_bool_literal).astype(bool)
    if column.type == ColumnType.DATE.value:
        return pd.to_datetime(values, format="%Y-%m-%d")
    if column.type == ColumnType.DATETIME.value:
        return pd.to_datetime(values, utc=True, format="ISO8601")
    if column.type == ColumnType.DECIMAL.value:
        normalized = values.map(lambda v: normalize_decimal(v, column.precision, column.scale))
        return pd.to_numeric(normalized).astype(float).round(column.scale)
    return values.astype(object)


def records_to_dataframe(
    schema: "SchemaSpec",
    records: Sequence[Sequence[str]],
) -> pd.DataFrame:
    """Convert validated records to a typed DataFrame.

    Records must already have passed ``validate_records`` for ``schema``;
    conversion errors are not caught here.

    Args:
        schema: Schema the records were validated against
        records: Validated records

    Returns:
        DataFrame with one column per schema column

    Example:
        >>> schema = parse_schema("ver:1,hdr:false,del:,; Name:string(10),Age:int")
        >>> df = records_to_dataframe(schema, [["Ada", "36"]])
        >>> df["Age"].dtype
        Int64Dtype()
    """
    names = frame_column_names(schema)
    raw = pd.DataFrame([list(r) for r in records], columns=names, dtype=object)

    converted: Dict[str, pd.Series] = {
        name: _convert(raw[name], column) for name, column in zip(names, schema.columns)
    }
    frame = pd.DataFrame(converted, columns=names)
    logger.debug("Converted %d records into a %d-column frame", len(frame), len(names))
    return frame
