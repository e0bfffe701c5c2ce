"""Field definitions for the core design element builder.

A field is either a free-text field holding one value or a dropdown field
holding an ordered list of options, an optional default selection and an
optional list of visibility conditions. Both are immutable; every change
produces a new instance via ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union


class FieldKind(str, Enum):
    """Kind of a field. Values match the host document's ``type`` key."""

    SINGLE = "text"  # One free-text value
    MULTI = "dropdown"  # Ordered options plus an optional default


@dataclass(frozen=True)
class Condition:
    """Show the owning field only while another field has a given value.

    Attributes:
        depends_on: Id of the dropdown field being watched
        required_value: Option that must be selected in that field
    """

    depends_on: str
    required_value: str

    def is_satisfied(self, selected: Optional[str]) -> bool:
        """Check whether the watched field's current value matches."""
        return selected == self.required_value

    def __str__(self) -> str:
        return f"{self.depends_on} = {self.required_value!r}"


@dataclass(frozen=True)
class TextField:
    """Single-value field."""

    kind: ClassVar[FieldKind] = FieldKind.SINGLE

    id: str
    label: str
    value: str = ""

    @property
    def has_value(self) -> bool:
        return bool(self.value)


@dataclass(frozen=True)
class DropdownField:
    """Multi-value field with a default selection and visibility conditions.

    Attributes:
        id: Stable identifier assigned at creation
        label: Display name
        options: Ordered option strings; duplicates are distinct by position
        default_option: None, or one of ``options``
        conditions: None when the field has no conditions, never empty
    """

    kind: ClassVar[FieldKind] = FieldKind.MULTI

    id: str
    label: str
    options: Tuple[str, ...] = ()
    default_option: Optional[str] = None
    conditions: Optional[Tuple[Condition, ...]] = None

    @property
    def has_conditions(self) -> bool:
        return bool(self.conditions)

    def condition_for(self, depends_on: str) -> Optional[Condition]:
        """Return the condition watching ``depends_on``, if any."""
        for condition in self.conditions or ():
            if condition.depends_on == depends_on:
                return condition
        return None


Field = Union[TextField, DropdownField]

FIELD_CLASSES = {
    FieldKind.SINGLE: TextField,
    FieldKind.MULTI: DropdownField,
}


def new_field(field_id: str, label: str, kind: FieldKind) -> Field:
    """Create an empty field of the given kind."""
    return FIELD_CLASSES[FieldKind(kind)](id=field_id, label=label)
