"""Schema serialization.

Inverse of :func:`webcsv.lib.parser.parse_schema`::

    ver:<version>,hdr:<true|false>,del:<delimiter>; <col1>,<col2>,...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from webcsv.lib.schema import ColumnType

if TYPE_CHECKING:
    from webcsv.lib.schema import ColumnSpec, SchemaSpec

__all__ = ["print_schema", "format_column"]


def format_column(column: "ColumnSpec") -> str:
    """Render one column as ``name:type`` plus its parameters.

    The name and its colon are omitted when the name is empty. Only string
    columns print ``(length)`` and only decimal columns ``(precision,scale)``.
    """
    text = f"{column.name}:{column.type}" if column.name else column.type

    if column.type == ColumnType.STRING.value:
        text += f"({column.length})"
    elif column.type == ColumnType.DECIMAL.value:
        text += f"({column.precision},{column.scale})"

    return text


def print_schema(schema: "SchemaSpec") -> str:
    """Serialize a schema to its description text."""
    header = "ver:{},hdr:{},del:{}".format(
        schema.version,
        "true" if schema.with_header else "false",
        schema.delimiter,
    )
    return header + "; " + ",".join(format_column(c) for c in schema.columns)
