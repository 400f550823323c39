"""Schema description parser.

Turns a schema description such as::

    ver:1.0,hdr:false,del:,; LastName:string(50),Age:int,Height:decimal(13,3)

into a :class:`~webcsv.lib.schema.SchemaSpec`. The text has two sections
separated by ``;``: comma-separated ``key:value`` properties, then
comma-separated ``name:type(params)`` columns.

Decimal parameters use a comma too (``decimal(13,3)``), so before the
columns are split on commas, every comma that sits inside a parameter list
is masked with ``;`` (which can no longer occur in the columns section).
Parameters are then split on the mask to recover precision and scale.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from webcsv.lib.errors import SchemaSyntaxError
from webcsv.lib.schema import (
    DEFAULT_DELIMITER,
    DEFAULT_STRING_LENGTH,
    ColumnSpec,
    SchemaSpec,
)
from webcsv.lib.validators import parse_bool_literal

logger = logging.getLogger(__name__)

__all__ = [
    "parse_schema",
    "parse_column",
    "mask_parameter_commas",
    "parse_int_or_zero",
]

SECTION_SEPARATOR = ";"
PARAM_SEPARATOR_MASK = ";"

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_int_or_zero(value: str) -> int:
    """Parse a base-10 integer, returning 0 when ``value`` is not one.

    Column parameters are parsed tolerantly: a malformed length, precision
    or scale only loosens a constraint, it never changes which columns exist.

    Example:
        >>> parse_int_or_zero("50")
        50
        >>> parse_int_or_zero("5O")
        0
    """
    if not _INTEGER_PATTERN.fullmatch(value):
        return 0
    return int(value)


def mask_parameter_commas(columns: str) -> str:
    """Replace commas inside ``(...)`` parameter lists with the mask character.

    Single pass tracking the most recent ``(``, ``,`` and ``)``. As soon as
    the latest comma lies strictly between the latest open and close
    parenthesis it is masked and all three positions reset. Nesting is not
    tracked; only the last comma before a ``)`` is masked.

    Example:
        >>> mask_parameter_commas("A:decimal(1,2),B:string(5)")
        'A:decimal(1;2),B:string(5)'
    """
    chars = list(columns)
    open_pos = -1
    close_pos = -1
    comma_pos = -1

    for i, c in enumerate(chars):
        if c == "(":
            open_pos = i
        elif c == ",":
            comma_pos = i
        elif c == ")":
            close_pos = i

        if (
            open_pos != -1
            and comma_pos != -1
            and open_pos < comma_pos < close_pos
        ):
            chars[comma_pos] = PARAM_SEPARATOR_MASK
            open_pos = close_pos = comma_pos = -1

    return "".join(chars)


def parse_column(entry: str) -> Optional[ColumnSpec]:
    """Parse one ``name[:type[(params)]]`` entry of the columns section.

    Returns None for entries with more than one ``:`` separator.
    """
    parts = entry.split(":")
    name = parts[0].strip()

    # Name only: default to a long string column
    if len(parts) == 1:
        return ColumnSpec.string(name, DEFAULT_STRING_LENGTH)

    if len(parts) != 2:
        return None

    label = parts[1].strip().lower()
    col_type = label
    length = precision = scale = 0

    # "decimal(13;3)" -> "decimal 13;3"
    label = label.replace("(", " ").replace(")", "")
    pos = label.find(" ")
    if pos != -1:
        col_type = label[:pos]
        params = label[pos + 1 :]
        if PARAM_SEPARATOR_MASK in params:
            raw_precision, _, raw_scale = params.partition(PARAM_SEPARATOR_MASK)
            precision = parse_int_or_zero(raw_precision)
            scale = parse_int_or_zero(raw_scale)
        else:
            length = parse_int_or_zero(params)

    return ColumnSpec(name, col_type, length=length, precision=precision, scale=scale)


def _parse_properties(section: str) -> dict:
    props = {"version": "", "with_header": False, "delimiter": DEFAULT_DELIMITER}

    for item in section.split(","):
        key, _, value = item.partition(":")
        key = key.strip()
        if key == "ver":
            props["version"] = value.strip()
        elif key == "hdr":
            try:
                props["with_header"] = parse_bool_literal(value.strip())
            except ValueError:
                props["with_header"] = False
        elif key == "del":
            props["delimiter"] = value or DEFAULT_DELIMITER
        # Unknown keys are ignored

    return props


def parse_schema(text: str) -> SchemaSpec:
    """Parse a schema description into a SchemaSpec.

    Args:
        text: Schema description, ``properties; columns``

    Returns:
        Parsed SchemaSpec

    Raises:
        SchemaSyntaxError: If the description defines no columns

    Example:
        >>> schema = parse_schema("ver:1.0,hdr:false,del:,; A:decimal(1,2),B:string(5)")
        >>> [(c.name, c.type, c.length, c.precision, c.scale) for c in schema.columns]
        [('A', 'decimal', 0, 1, 2), ('B', 'string', 5, 0, 0)]
    """
    sections = text.split(SECTION_SEPARATOR)
    if len(sections) < 2:
        raise SchemaSyntaxError("No schema defined: missing ';' before the columns", text=text)

    props = _parse_properties(sections[0])

    columns_section = sections[1]
    if not columns_section.strip():
        raise SchemaSyntaxError("No schema defined: the columns section is empty", text=text)

    entries = mask_parameter_commas(columns_section).split(",")

    columns: List[ColumnSpec] = []
    loaded = False
    for index, entry in enumerate(entries):
        column = parse_column(entry)
        if column is None:
            logger.warning(
                "Column %d ('%s') has more than one ':' separator; keeping an empty placeholder",
                index,
                entry.strip(),
            )
            columns.append(ColumnSpec("", ""))
            continue
        if not column.known_type:
            logger.debug("Column %d ('%s') has unrecognized type '%s'", index, column.name, column.type)
        columns.append(column)
        loaded = True

    logger.debug("Parsed schema version '%s' with %d columns", props["version"], len(columns))

    return SchemaSpec(
        version=props["version"],
        with_header=props["with_header"],
        delimiter=props["delimiter"],
        columns=tuple(columns),
        loaded=loaded,
    )
