"""WebCSV schema engine.

This package contains the schema model, the description parser and
printer, the schema comparator and the CSV payload validator, plus the
logging and configuration helpers shared by the service and the CLI.
"""

from webcsv.lib.compare import find_schema_mismatch, is_valid
from webcsv.lib.errors import (
    FieldValidationError,
    PayloadDecodeError,
    SchemaIncompatibleError,
    SchemaSyntaxError,
    WebCSVError,
)
from webcsv.lib.parser import mask_parameter_commas, parse_column, parse_int_or_zero, parse_schema
from webcsv.lib.printer import format_column, print_schema
from webcsv.lib.records import check_record, decode_records, validate_records
from webcsv.lib.schema import (
    DEFAULT_DELIMITER,
    DEFAULT_STRING_LENGTH,
    ColumnSpec,
    ColumnType,
    SchemaSpec,
)
from webcsv.lib.validators import (
    DecimalFormatError,
    FieldIssue,
    check_field,
    normalize_decimal,
    parse_bool_literal,
    parse_int64,
)

__all__ = [
    # Schema model
    "ColumnSpec",
    "ColumnType",
    "SchemaSpec",
    "DEFAULT_DELIMITER",
    "DEFAULT_STRING_LENGTH",
    # Parsing and printing
    "parse_schema",
    "parse_column",
    "parse_int_or_zero",
    "mask_parameter_commas",
    "print_schema",
    "format_column",
    # Comparison
    "is_valid",
    "find_schema_mismatch",
    # Validation
    "FieldIssue",
    "DecimalFormatError",
    "check_field",
    "check_record",
    "decode_records",
    "normalize_decimal",
    "parse_bool_literal",
    "parse_int64",
    "validate_records",
    # Errors
    "WebCSVError",
    "SchemaSyntaxError",
    "SchemaIncompatibleError",
    "PayloadDecodeError",
    "FieldValidationError",
]
