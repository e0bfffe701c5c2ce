"""Structured exception hierarchy for the field builder.

Every error is raised before a new snapshot is built, so a failed mutation
always leaves the caller's snapshot as it was.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "FieldConfigError",
    "InvalidInputError",
    "OutOfRangeError",
    "DocumentError",
]


class FieldConfigError(Exception):
    """Base exception for all field builder errors.

    Provides structured error information for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        field_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.field_id = field_id
        self.details = details or {}
        self.suggestion = suggestion

        # Build full message
        parts = [f"[{field_id}] {message}" if field_id else message]

        if self.details:
            detail_lines = [f"  {k}: {v}" for k, v in self.details.items()]
            parts.append("\nDetails:")
            parts.extend(detail_lines)

        if suggestion:
            parts.append(f"\nSuggestion: {suggestion}")

        super().__init__("\n".join(parts))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "field_id": self.field_id,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class InvalidInputError(FieldConfigError, ValueError):
    """Malformed or out-of-domain argument.

    Raised for blank labels, unknown default values, self-referential
    conditions and operations applied to the wrong kind of field.
    """

    def __init__(
        self,
        message: str,
        *,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.value = value

        details = kwargs.pop("details", None) or {}
        if value is not None:
            details["value"] = repr(value)

        super().__init__(message, details=details, **kwargs)


class OutOfRangeError(FieldConfigError, IndexError):
    """Index argument outside ``[0, length)``."""

    def __init__(
        self,
        message: str,
        *,
        index: int,
        length: int,
        **kwargs: Any,
    ) -> None:
        self.index = index
        self.length = length

        details = kwargs.pop("details", None) or {}
        details["index"] = index
        details["length"] = length

        super().__init__(message, details=details, **kwargs)


class DocumentError(FieldConfigError):
    """An encoded field document cannot be decoded."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.path = path

        details = kwargs.pop("details", None) or {}
        if path:
            details["path"] = path

        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = (
                "Check that the document is a list of fields with "
                "id, label and type keys."
            )

        super().__init__(message, details=details, suggestion=suggestion, **kwargs)
