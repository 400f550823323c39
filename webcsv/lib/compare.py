"""Schema equivalence check.

A server refuses payloads declared against a schema that does not match
its own before looking at the payload body. Version and column names
compare case-insensitively; everything else must match exactly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from webcsv.lib.schema import SchemaSpec

__all__ = ["is_valid", "find_schema_mismatch"]

_COLUMN_ATTRIBUTES = ("type", "length", "precision", "scale")


def find_schema_mismatch(reference: "SchemaSpec", candidate: "SchemaSpec") -> Optional[str]:
    """Describe the first difference between two schemas.

    Checks version, header flag, delimiter, column count, then each
    column's name, type, length, precision and scale, in that order.

    Returns:
        A description of the first mismatch, or None if the schemas match
    """
    if reference.version.lower() != candidate.version.lower():
        return f"version '{candidate.version}' does not match '{reference.version}'"

    if reference.with_header != candidate.with_header:
        return f"header flag {candidate.with_header} does not match {reference.with_header}"

    if reference.delimiter != candidate.delimiter:
        return f"delimiter '{candidate.delimiter}' does not match '{reference.delimiter}'"

    if len(reference.columns) != len(candidate.columns):
        return (
            f"{len(candidate.columns)} columns declared, "
            f"expected {len(reference.columns)}"
        )

    for index, (expected, actual) in enumerate(zip(reference.columns, candidate.columns)):
        if expected.name.lower() != actual.name.lower():
            return f"column {index} name '{actual.name}' does not match '{expected.name}'"
        for attr in _COLUMN_ATTRIBUTES:
            if getattr(expected, attr) != getattr(actual, attr):
                return (
                    f"column {index} ('{expected.name}') {attr} "
                    f"{getattr(actual, attr)!r} does not match {getattr(expected, attr)!r}"
                )

    return None


def is_valid(reference: "SchemaSpec", candidate: "SchemaSpec") -> bool:
    """Whether ``candidate`` is structurally equal to ``reference``."""
    return find_schema_mismatch(reference, candidate) is None
