"""Field validation against column types.

Each check takes one textual CSV field and its :class:`ColumnSpec` and
reports a :class:`FieldIssue` when the value does not fit the declared
type. Checks are pure functions with no shared state.

Decimal values are normalized before they are judged: the fractional
part is truncated or zero-padded to the column's scale, so ``12.3456``
against ``decimal(13,3)`` is checked as ``12.345``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from webcsv.lib.schema import ColumnSpec, ColumnType

logger = logging.getLogger(__name__)

__all__ = [
    "FieldIssue",
    "DecimalFormatError",
    "check_field",
    "normalize_decimal",
    "parse_bool_literal",
    "parse_int64",
]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)")
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_DATETIME_PATTERN = re.compile(
    r"(?P<date>[0-9]{4}-[0-9]{2}-[0-9]{2})T"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.[0-9]+)?"
    r"(?:Z|[+-](?P<tz_hour>[0-9]{2}):(?P<tz_minute>[0-9]{2}))"
)

_BOOL_LITERALS: Dict[str, bool] = {
    "1": True,
    "t": True,
    "T": True,
    "true": True,
    "TRUE": True,
    "True": True,
    "0": False,
    "f": False,
    "F": False,
    "false": False,
    "FALSE": False,
    "False": False,
}


@dataclass(frozen=True)
class FieldIssue:
    """A field that failed validation.

    ``line`` is the 1-based record number, ``column`` the 0-based column index.
    """

    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return f"Column {self.column} of line {self.line} {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "column": self.column, "message": self.message}


class DecimalFormatError(ValueError):
    """A value could not be normalized to a decimal column's precision and scale."""


def parse_bool_literal(value: str) -> bool:
    """Parse a boolean literal.

    Accepts 1, t, T, TRUE, true, True, 0, f, F, FALSE, false, False.

    Raises:
        ValueError: For anything else
    """
    try:
        return _BOOL_LITERALS[value]
    except KeyError:
        raise ValueError(f"invalid boolean literal '{value}'") from None


def parse_int64(value: str) -> int:
    """Parse a base-10 signed 64-bit integer.

    Raises:
        ValueError: If ``value`` has non-digit characters or is out of range
    """
    if not _INTEGER_PATTERN.fullmatch(value):
        raise ValueError(f"invalid syntax '{value}'")
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise ValueError(f"value out of range '{value}'")
    return number


def normalize_decimal(value: str, precision: int, scale: int) -> str:
    """Normalize a decimal value to ``scale`` fractional digits.

    A whole number gets ``scale`` zeros and may have at most
    ``precision - scale`` digits. A value with a fractional part has it
    truncated or right-padded to ``scale`` digits, and its whole part may
    have at most ``precision`` characters.

    Args:
        value: Raw field value
        precision: Column precision
        scale: Column scale

    Returns:
        The normalized ``whole.fraction`` string

    Raises:
        DecimalFormatError: If the value does not fit the column

    Example:
        >>> normalize_decimal("12.3456", 13, 3)
        '12.345'
        >>> normalize_decimal("7", 13, 3)
        '7.000'
    """
    whole, point, fraction = value.partition(".")

    if not point:
        if len(value) > precision - scale:
            raise DecimalFormatError("is not a valid decimal scale as specified by the schema.")
        fraction = "0" * scale
    else:
        if len(fraction) > scale:
            fraction = fraction[:scale]
        else:
            fraction = fraction + "0" * (scale - len(fraction))

        try:
            parse_int64(fraction)
        except ValueError:
            raise DecimalFormatError(
                "contains an invalid decimal scale as specified by the schema."
            ) from None

        if len(whole) > precision:
            raise DecimalFormatError(
                "exceeds the whole number length as specified by the schema."
            )

    normalized = f"{whole}.{fraction}"
    if not _DECIMAL_PATTERN.fullmatch(normalized):
        raise DecimalFormatError(
            f"could not be converted to decimal. Error: invalid syntax '{normalized}'"
        )
    return normalized


def _check_string(value: str, column: ColumnSpec) -> Optional[str]:
    if len(value) > column.length:
        return f"exceeds specified column length of {column.length}"
    return None


def _check_int(value: str, column: ColumnSpec) -> Optional[str]:
    try:
        parse_int64(value)
    except ValueError as e:
        return f"could not be converted to integer. Error: {e}"
    return None


def _check_bool(value: str, column: ColumnSpec) -> Optional[str]:
    try:
        parse_bool_literal(value)
    except ValueError as e:
        return f"could not be converted to boolean. Error: {e}"
    return None


def _check_date(value: str, column: ColumnSpec) -> Optional[str]:
    if not _DATE_PATTERN.fullmatch(value):
        return f"could not be converted to date. Error: '{value}' does not match YYYY-MM-DD"
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError as e:
        return f"could not be converted to date. Error: {e}"
    return None


def _check_datetime(value: str, column: ColumnSpec) -> Optional[str]:
    match = _DATETIME_PATTERN.fullmatch(value)
    if match is None:
        return f"could not be converted to datetime. Error: '{value}' is not an RFC 3339 timestamp"
    try:
        datetime.strptime(
            f"{match['date']} {match['hour']}:{match['minute']}:{match['second']}",
            "%Y-%m-%d %H:%M:%S",
        )
    except ValueError as e:
        return f"could not be converted to datetime. Error: {e}"
    if match["tz_hour"] is not None and (
        int(match["tz_hour"]) > 23 or int(match["tz_minute"]) > 59
    ):
        return f"could not be converted to datetime. Error: time zone offset out of range in '{value}'"
    return None


def _check_decimal(value: str, column: ColumnSpec) -> Optional[str]:
    try:
        normalize_decimal(value, column.precision, column.scale)
    except DecimalFormatError as e:
        return str(e)
    return None


_CHECKS: Dict[str, Callable[[str, ColumnSpec], Optional[str]]] = {
    ColumnType.STRING.value: _check_string,
    ColumnType.INT.value: _check_int,
    ColumnType.BOOL.value: _check_bool,
    ColumnType.DATE.value: _check_date,
    ColumnType.DATETIME.value: _check_datetime,
    ColumnType.DECIMAL.value: _check_decimal,
}


def check_field(
    value: str,
    column: ColumnSpec,
    *,
    line: int,
    index: int,
    strict: bool = False,
) -> Optional[FieldIssue]:
    """Validate one field against its column.

    Args:
        value: Raw field text
        column: Column the field belongs to
        line: 1-based record number (for the issue message)
        index: 0-based column index (for the issue message)
        strict: Reject columns whose type is not recognized

    Returns:
        FieldIssue if the value is invalid, None otherwise

    Unrecognized types validate nothing unless ``strict`` is set.
    """
    check = _CHECKS.get(column.type)
    if check is None:
        if strict:
            return FieldIssue(line, index, f"has unsupported column type '{column.type}'")
        return None

    message = check(value, column)
    if message is None:
        return None
    return FieldIssue(line, index, message)
