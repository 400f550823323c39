"""WebCSV schema data model.

A schema describes the shape of a CSV payload: an opaque version tag,
whether the payload carries a header row, the field delimiter and an
ordered sequence of columns. Column order is significant: field ``i`` of
every record is checked against ``columns[i]``.

Schemas are immutable. They are either produced by
:func:`webcsv.lib.parser.parse_schema` or built directly by an owning
application (see ``webcsv.server.people.PEOPLE_SCHEMA``).

Example:
    >>> from webcsv.lib import parse_schema
    >>> schema = parse_schema("ver:1.0,hdr:false,del:,; LastName:string(50),Age:int")
    >>> schema.columns[0]
    ColumnSpec(name='LastName', type='string', length=50, precision=0, scale=0)
    >>> schema.print_schema()
    'ver:1.0,hdr:false,del:,; LastName:string(50),Age:int'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from webcsv.lib.validators import FieldIssue

__all__ = [
    "ColumnType",
    "ColumnSpec",
    "SchemaSpec",
    "DEFAULT_STRING_LENGTH",
    "DEFAULT_DELIMITER",
]

# Length given to name-only columns ("LastName" with no type)
DEFAULT_STRING_LENGTH = 4000

DEFAULT_DELIMITER = ","


class ColumnType(Enum):
    """Column types the validator understands."""

    STRING = "string"
    INT = "int"
    BOOL = "bool"
    DATE = "date"
    DATETIME = "datetime"
    DECIMAL = "decimal"

    @classmethod
    def is_known(cls, value: str) -> bool:
        """Whether ``value`` names one of the recognized types (case-sensitive)."""
        return value in _KNOWN_TYPES


_KNOWN_TYPES = frozenset(t.value for t in ColumnType)


@dataclass(frozen=True)
class ColumnSpec:
    """One column of a schema.

    ``type`` is kept as the declared string so that unrecognized types
    survive parsing and printing. ``length`` only matters for ``string``
    columns, ``precision`` and ``scale`` only for ``decimal`` columns.
    """

    name: str
    type: str
    length: int = 0
    precision: int = 0
    scale: int = 0

    @classmethod
    def string(cls, name: str, length: int = DEFAULT_STRING_LENGTH) -> "ColumnSpec":
        """Create a string column."""
        return cls(name, ColumnType.STRING.value, length=length)

    @classmethod
    def decimal(cls, name: str, precision: int, scale: int) -> "ColumnSpec":
        """Create a decimal column."""
        return cls(name, ColumnType.DECIMAL.value, precision=precision, scale=scale)

    @property
    def known_type(self) -> bool:
        return ColumnType.is_known(self.type)


@dataclass(frozen=True)
class SchemaSpec:
    """A parsed or programmatically built WebCSV schema."""

    version: str = ""
    with_header: bool = False
    delimiter: str = DEFAULT_DELIMITER
    columns: Tuple[ColumnSpec, ...] = ()
    loaded: bool = field(default=True, compare=False, repr=False)

    def __post_init__(self) -> None:
        # Accept any sequence of columns but store a tuple
        if not isinstance(self.columns, tuple):
            object.__setattr__(self, "columns", tuple(self.columns))
        if not self.delimiter:
            object.__setattr__(self, "delimiter", DEFAULT_DELIMITER)

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def is_valid(self, candidate: "SchemaSpec") -> bool:
        """Check whether ``candidate`` is structurally equal to this schema."""
        from webcsv.lib.compare import is_valid

        return is_valid(self, candidate)

    def find_mismatch(self, candidate: "SchemaSpec") -> Optional[str]:
        """Describe the first difference between this schema and ``candidate``."""
        from webcsv.lib.compare import find_schema_mismatch

        return find_schema_mismatch(self, candidate)

    def validate_records(self, payload: bytes, *, strict: bool = False) -> List[List[str]]:
        """Decode ``payload`` as CSV and validate every field.

        Raises:
            PayloadDecodeError: If the bytes are not well-formed CSV
            FieldValidationError: If any field fails its column check
        """
        from webcsv.lib.records import validate_records

        return validate_records(self, payload, strict=strict)

    def check_record(
        self, record: List[str], line: int, *, strict: bool = False
    ) -> List["FieldIssue"]:
        """Check one decoded record; ``line`` is its 1-based position."""
        from webcsv.lib.records import check_record

        return check_record(self, record, line, strict=strict)

    def print_schema(self) -> str:
        """Serialize back to the schema description format."""
        from webcsv.lib.printer import print_schema

        return print_schema(self)

    def __str__(self) -> str:
        return self.print_schema()
