"""Value and default-option mutations.

Text fields hold one value; dropdown fields hold ordered options and an
optional default. The default always names a current option or is None:
removing the option that is the default moves the default to the first
remaining option, or clears it when none remain.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Optional, Type, TypeVar

from designfields.lib.errors import InvalidInputError, OutOfRangeError
from designfields.models import (
    DropdownField,
    Field,
    FieldCollection,
    TextField,
)

logger = logging.getLogger(__name__)

__all__ = [
    "add_option",
    "clear_default_option",
    "clear_single_value",
    "default_placeholder",
    "initial_selections",
    "remove_option",
    "set_default_option",
    "set_single_value",
]

F = TypeVar("F", TextField, DropdownField)


def _expect(field: Field, cls: Type[F], operation: str) -> F:
    if not isinstance(field, cls):
        raise InvalidInputError(
            f"{operation} does not apply to {field.kind.value} fields",
            field_id=field.id,
            details={"expected_kind": cls.kind.value},
        )
    return field


def _require(snapshot: FieldCollection, field_id: str, cls: Type[F], operation: str) -> F:
    return _expect(snapshot.require(field_id), cls, operation)


def set_single_value(
    snapshot: FieldCollection, field_id: str, text: str
) -> FieldCollection:
    """Overwrite a text field's value. Blank text is ignored.

    Raises:
        InvalidInputError: If the field is unknown or not a text field
    """
    current = _require(snapshot, field_id, TextField, "set_single_value")
    if not text or not text.strip():
        logger.debug("Ignored blank value for %s", field_id)
        return snapshot
    return snapshot.replace(dataclasses.replace(current, value=text))


def clear_single_value(snapshot: FieldCollection, field_id: str) -> FieldCollection:
    """Empty a text field's value."""
    current = snapshot.get(field_id)
    if current is None:
        return snapshot
    current = _expect(current, TextField, "clear_single_value")
    return snapshot.replace(dataclasses.replace(current, value=""))


def add_option(snapshot: FieldCollection, field_id: str, text: str) -> FieldCollection:
    """Append an option to a dropdown. Blank text is ignored.

    Duplicate values are allowed; each occurrence is its own entry. Adding
    an option never sets a default.

    Raises:
        InvalidInputError: If the field is unknown or not a dropdown
    """
    current = _require(snapshot, field_id, DropdownField, "add_option")
    if not text or not text.strip():
        logger.debug("Ignored blank option for %s", field_id)
        return snapshot
    return snapshot.replace(
        dataclasses.replace(current, options=current.options + (text,))
    )


def remove_option(
    snapshot: FieldCollection, field_id: str, index: int
) -> FieldCollection:
    """Remove the option at ``index`` and keep the default valid.

    Raises:
        InvalidInputError: If the field is not a dropdown
        OutOfRangeError: If ``index`` is not a valid option position
    """
    current = snapshot.get(field_id)
    if current is None:
        return snapshot
    current = _expect(current, DropdownField, "remove_option")

    options = current.options
    if not 0 <= index < len(options):
        raise OutOfRangeError(
            f"Option index {index} is outside the option list",
            index=index,
            length=len(options),
            field_id=field_id,
        )

    removed = options[index]
    remaining = options[:index] + options[index + 1:]

    default = current.default_option
    if removed == default:
        default = remaining[0] if remaining else None
        logger.debug("Default of %s moved from %r to %r", field_id, removed, default)

    return snapshot.replace(
        dataclasses.replace(current, options=remaining, default_option=default)
    )


def set_default_option(
    snapshot: FieldCollection, field_id: str, value: str
) -> FieldCollection:
    """Mark one of a dropdown's options as the default.

    Raises:
        InvalidInputError: If the field is unknown, not a dropdown, or
            ``value`` is not one of its options
    """
    current = _require(snapshot, field_id, DropdownField, "set_default_option")
    if value not in current.options:
        raise InvalidInputError(
            f"'{value}' is not an option of this field",
            field_id=field_id,
            details={"options": list(current.options)},
        )
    return snapshot.replace(dataclasses.replace(current, default_option=value))


def clear_default_option(snapshot: FieldCollection, field_id: str) -> FieldCollection:
    """Remove a dropdown's default selection."""
    current = snapshot.get(field_id)
    if current is None:
        return snapshot
    current = _expect(current, DropdownField, "clear_default_option")
    return snapshot.replace(dataclasses.replace(current, default_option=None))


def default_placeholder(field: DropdownField) -> str:
    """Text shown for a dropdown before the user picks a value."""
    if field.default_option is not None:
        return field.default_option
    return f"Select {field.label}"


def initial_selections(snapshot: FieldCollection) -> Dict[str, Optional[str]]:
    """Value each field starts with before any user interaction.

    Text fields start with their value (None when empty); dropdowns start
    with their default option.
    """
    selections: Dict[str, Optional[str]] = {}
    for f in snapshot:
        if isinstance(f, TextField):
            selections[f.id] = f.value or None
        else:
            selections[f.id] = f.default_option
    return selections
