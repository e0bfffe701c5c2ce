"""Field configuration and conditional visibility for core design elements.

Fields are kept in an immutable ``FieldCollection`` snapshot. Every builder
function takes a snapshot and returns a new one, so the caller decides when
to re-render or persist.

Usage:
    from designfields import FieldCollection, FieldKind, add_field, add_option

    fields = add_field(FieldCollection(), "Color", FieldKind.MULTI)
    color = fields.ids()[0]
    fields = add_option(fields, color, "Red")

    python -m designfields --file chair.json show
"""

from designfields.models import (
    Condition,
    DropdownField,
    Field,
    FieldCollection,
    FieldKind,
    TextField,
)
from designfields.lib import (
    DocumentError,
    FieldConfigError,
    InvalidInputError,
    OutOfRangeError,
    add_condition,
    add_field,
    add_option,
    clear_default_option,
    clear_single_value,
    decode_collection,
    encode_collection,
    evaluate_visibility,
    move_field,
    remove_condition,
    remove_field,
    remove_option,
    rename_field,
    reorder,
    set_default_option,
    set_single_value,
)

__version__ = "1.0.0"

__all__ = [
    "Condition",
    "DropdownField",
    "Field",
    "FieldCollection",
    "FieldKind",
    "TextField",
    "DocumentError",
    "FieldConfigError",
    "InvalidInputError",
    "OutOfRangeError",
    "add_condition",
    "add_field",
    "add_option",
    "clear_default_option",
    "clear_single_value",
    "decode_collection",
    "encode_collection",
    "evaluate_visibility",
    "move_field",
    "remove_condition",
    "remove_field",
    "remove_option",
    "rename_field",
    "reorder",
    "set_default_option",
    "set_single_value",
]
