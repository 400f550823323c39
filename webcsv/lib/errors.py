"""Structured exception hierarchy for the WebCSV schema engine.

Provides specific exception types for the failure modes of parsing a
schema description, comparing schemas and validating CSV payloads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from webcsv.lib.validators import FieldIssue

__all__ = [
    "WebCSVError",
    "SchemaSyntaxError",
    "SchemaIncompatibleError",
    "PayloadDecodeError",
    "FieldValidationError",
]


class WebCSVError(Exception):
    """Base exception for all WebCSV errors.

    Provides structured error information for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        self.suggestion = suggestion

        parts = [message]

        if details:
            detail_lines = [f"  {k}: {v}" for k, v in details.items()]
            parts.append("\nDetails:")
            parts.extend(detail_lines)

        if suggestion:
            parts.append(f"\nSuggestion: {suggestion}")

        super().__init__("\n".join(parts) if len(parts) > 1 else message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class SchemaSyntaxError(WebCSVError):
    """Schema description text could not be turned into a schema.

    Raised when the description has no columns section or the columns
    section is empty.
    """

    def __init__(self, message: str, *, text: Optional[str] = None, **kwargs: Any) -> None:
        self.text = text
        details = kwargs.pop("details", {})
        if text is not None:
            details["schema"] = text
        kwargs.setdefault(
            "suggestion",
            "Use 'ver:<version>,hdr:<true|false>,del:<delimiter>; <name>:<type>,...'",
        )
        super().__init__(message, details=details, **kwargs)


class SchemaIncompatibleError(WebCSVError):
    """A supplied schema does not match the expected schema."""

    def __init__(self, mismatch: str, **kwargs: Any) -> None:
        self.mismatch = mismatch
        super().__init__(f"Invalid schema: {mismatch}", **kwargs)


class PayloadDecodeError(WebCSVError):
    """The payload bytes are not well-formed CSV.

    Kept separate from FieldValidationError: the payload never reached
    field-level checks.
    """

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        cause: Optional[Exception] = None,
        **kwargs: Any,
    ) -> None:
        self.line = line
        self.cause = cause

        details = kwargs.pop("details", {})
        if line is not None:
            details["line"] = line
        if cause is not None:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__

        super().__init__(message, details=details, **kwargs)


class FieldValidationError(WebCSVError):
    """One or more fields failed validation against their column type.

    The message is the aggregate of every issue, one per line.
    """

    def __init__(self, issues: List["FieldIssue"]) -> None:
        self.issues = list(issues)
        super().__init__("\n".join(str(issue) for issue in self.issues))

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["issues"] = [issue.to_dict() for issue in self.issues]
        return data
