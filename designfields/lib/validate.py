"""Validation helpers for field collections.

Snapshots built with the ``designfields.lib`` functions always satisfy the
collection rules. Documents loaded from disk or from the host may not, so
they are checked here before use.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from designfields.lib.errors import InvalidInputError
from designfields.models import DropdownField, FieldCollection

logger = logging.getLogger(__name__)

__all__ = [
    "ValidationIssue",
    "ValidationSeverity",
    "format_validation_report",
    "validate_and_raise",
    "validate_collection",
]


class ValidationSeverity(Enum):
    """Severity of validation issues."""

    ERROR = "error"  # Breaks a collection rule
    WARNING = "warning"  # Allowed, but probably not what the author meant


@dataclass
class ValidationIssue:
    """A validation issue found in a collection."""

    severity: ValidationSeverity
    message: str
    field: str
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        prefix = "ERROR" if self.severity == ValidationSeverity.ERROR else "WARNING"
        result = f"[{prefix}] {self.field}: {self.message}"
        if self.suggestion:
            result += f"\n  Fix: {self.suggestion}"
        return result


def validate_collection(snapshot: FieldCollection) -> List[ValidationIssue]:
    """Check a snapshot against the collection rules.

    Returns:
        List of issues, empty when the snapshot is valid
    """
    issues: List[ValidationIssue] = []
    seen: set[str] = set()

    for f in snapshot:
        if f.id in seen:
            issues.append(ValidationIssue(
                severity=ValidationSeverity.ERROR,
                message="Duplicate field id",
                field=f.id,
                suggestion="Give every field its own id",
            ))
        seen.add(f.id)

        if not f.label.strip():
            issues.append(ValidationIssue(
                severity=ValidationSeverity.WARNING,
                message="Field has a blank label",
                field=f.id,
            ))

        if not isinstance(f, DropdownField):
            continue

        if f.default_option is not None and f.default_option not in f.options:
            issues.append(ValidationIssue(
                severity=ValidationSeverity.ERROR,
                message=f"Default '{f.default_option}' is not one of the options",
                field=f.id,
                suggestion="Clear the default or add the option",
            ))

        watched: set[str] = set()
        for condition in f.conditions or ():
            target = snapshot.get(condition.depends_on)
            if condition.depends_on in watched:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    message=f"More than one condition on '{condition.depends_on}'",
                    field=f.id,
                ))
            watched.add(condition.depends_on)

            if condition.depends_on == f.id:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    message="Field has a condition on itself",
                    field=f.id,
                ))
            elif target is None:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    message=f"Condition refers to missing field '{condition.depends_on}'",
                    field=f.id,
                    suggestion="Remove the condition",
                ))
            elif not isinstance(target, DropdownField):
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    message=f"Condition refers to text field '{condition.depends_on}'",
                    field=f.id,
                    suggestion="Conditions can only watch dropdown fields",
                ))
            elif condition.required_value not in target.options:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    message=(
                        f"'{condition.required_value}' is not an option of "
                        f"'{target.label}'; the field will stay hidden"
                    ),
                    field=f.id,
                ))

    return issues


def validate_and_raise(snapshot: FieldCollection) -> None:
    """Validate a snapshot and raise if errors are found.

    Warnings are logged; errors are collected into one exception.

    Raises:
        InvalidInputError: If any validation errors are found
    """
    issues = validate_collection(snapshot)
    errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
    warnings = [i for i in issues if i.severity == ValidationSeverity.WARNING]

    for warning in warnings:
        logger.warning(str(warning))

    if errors:
        error_messages = "\n\n".join(str(e) for e in errors)
        raise InvalidInputError(
            f"Field collection validation failed:\n\n{error_messages}",
            details={"error_count": len(errors)},
        )


def format_validation_report(issues: List[ValidationIssue]) -> str:
    """Format validation issues as a readable report."""
    if not issues:
        return "Field collection is valid."

    errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
    warnings = [i for i in issues if i.severity == ValidationSeverity.WARNING]

    lines = []

    if errors:
        lines.append(f"Found {len(errors)} error(s):")
        lines.append("-" * 40)
        for error in errors:
            lines.append(str(error))
            lines.append("")

    if warnings:
        lines.append(f"Found {len(warnings)} warning(s):")
        lines.append("-" * 40)
        for warning in warnings:
            lines.append(str(warning))
            lines.append("")

    return "\n".join(lines)
