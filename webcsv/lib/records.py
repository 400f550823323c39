"""CSV payload decoding and record validation.

Decodes raw payload bytes into records with the standard library CSV
reader, then checks every field against the column at the same position.
Validation is all-or-nothing: any issue rejects the whole payload.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import TYPE_CHECKING, List

from webcsv.lib.errors import FieldValidationError, PayloadDecodeError
from webcsv.lib.validators import FieldIssue, check_field

if TYPE_CHECKING:
    from webcsv.lib.schema import SchemaSpec

logger = logging.getLogger(__name__)

__all__ = ["decode_records", "check_record", "validate_records"]


def decode_records(payload: bytes, delimiter: str = ",") -> List[List[str]]:
    """Decode a CSV payload into records.

    Quoted fields may contain the delimiter, quotes (doubled) and newlines.
    Blank lines are skipped. Every record must have as many fields as the
    first one.

    Args:
        payload: Raw CSV bytes (UTF-8)
        delimiter: Single-character field delimiter

    Returns:
        Records in payload order

    Raises:
        PayloadDecodeError: If the payload is not well-formed CSV
    """
    if len(delimiter) != 1:
        raise PayloadDecodeError(
            f"Unsupported delimiter '{delimiter}'",
            suggestion="Declare a single-character delimiter with 'del:'",
        )

    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise PayloadDecodeError("Payload is not valid UTF-8", cause=e) from e

    # No field can be longer than the payload itself
    if len(text) > csv.field_size_limit():
        csv.field_size_limit(len(text))

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)
    records: List[List[str]] = []
    expected_fields = None

    try:
        for row in reader:
            if not row:
                continue
            if expected_fields is None:
                expected_fields = len(row)
            elif len(row) != expected_fields:
                raise PayloadDecodeError(
                    f"Record {len(records) + 1} has {len(row)} fields, expected {expected_fields}",
                    line=reader.line_num,
                )
            records.append(row)
    except csv.Error as e:
        raise PayloadDecodeError("Malformed CSV payload", line=reader.line_num, cause=e) from e

    return records


def check_record(
    schema: "SchemaSpec",
    record: List[str],
    line: int,
    *,
    strict: bool = False,
) -> List[FieldIssue]:
    """Check every field of one record against the schema's columns.

    A field count that differs from the column count is reported as an
    issue; the overlapping fields are still checked.
    """
    issues: List[FieldIssue] = []

    if len(record) != len(schema.columns):
        issues.append(
            FieldIssue(
                line,
                min(len(record), len(schema.columns)),
                f"has {len(record)} fields but the schema declares {len(schema.columns)} columns",
            )
        )

    for index, (value, column) in enumerate(zip(record, schema.columns)):
        issue = check_field(value, column, line=line, index=index, strict=strict)
        if issue is not None:
            issues.append(issue)

    return issues


def validate_records(
    schema: "SchemaSpec",
    payload: bytes,
    *,
    strict: bool = False,
) -> List[List[str]]:
    """Decode ``payload`` and validate every record against ``schema``.

    Checking stops after the first record that has issues; every issue of
    that record is reported.

    Args:
        schema: Schema the payload was declared against
        payload: Raw CSV bytes
        strict: Reject columns with unrecognized types

    Returns:
        Records in payload order, values unchanged

    Raises:
        PayloadDecodeError: If the payload is not well-formed CSV
        FieldValidationError: If any field is invalid
    """
    records = decode_records(payload, schema.delimiter)

    issues: List[FieldIssue] = []
    for line, record in enumerate(records, 1):
        issues.extend(check_record(schema, record, line, strict=strict))
        if issues:
            break

    if issues:
        logger.warning(
            "Payload rejected: %d issue(s) in record %d of %d",
            len(issues),
            issues[0].line,
            len(records),
        )
        raise FieldValidationError(issues)

    logger.debug("Validated %d records against schema version '%s'", len(records), schema.version)
    return records
