"""WebCSV: a compact schema language for CSV payloads.

Parse a schema description, compare it against an expected schema and
validate raw CSV bytes against it::

    from webcsv import parse_schema

    schema = parse_schema("ver:1.0,hdr:false,del:,; LastName:string(50),Age:int")
    records = schema.validate_records(b"Lovelace,36\\n")
"""

from webcsv.lib import (
    ColumnSpec,
    FieldValidationError,
    PayloadDecodeError,
    SchemaIncompatibleError,
    SchemaSpec,
    SchemaSyntaxError,
    WebCSVError,
    is_valid,
    parse_schema,
    print_schema,
    validate_records,
)

__version__ = "1.0.0"

__all__ = [
    "ColumnSpec",
    "SchemaSpec",
    "parse_schema",
    "print_schema",
    "is_valid",
    "validate_records",
    "WebCSVError",
    "SchemaSyntaxError",
    "SchemaIncompatibleError",
    "PayloadDecodeError",
    "FieldValidationError",
]
