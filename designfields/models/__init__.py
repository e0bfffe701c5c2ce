"""Immutable data types for the field builder.

These classes carry no behaviour beyond lookups; all mutations live in
``designfields.lib`` as pure functions returning new snapshots.
"""

from designfields.models.field import (
    Condition,
    DropdownField,
    Field,
    FieldKind,
    TextField,
    new_field,
)
from designfields.models.collection import FieldCollection

__all__ = [
    "Condition",
    "DropdownField",
    "Field",
    "FieldCollection",
    "FieldKind",
    "TextField",
    "new_field",
]
