"""Field builder library modules.

This package contains the pure snapshot functions for building a design
element's fields (store, values, conditions), plus the document codec,
validation, settings and logging used around them.
"""

from designfields.lib.errors import (
    DocumentError,
    FieldConfigError,
    InvalidInputError,
    OutOfRangeError,
)
from designfields.lib.store import (
    CollectionSummary,
    add_field,
    generate_field_id,
    move_field,
    remove_field,
    rename_field,
    reorder,
    summarize,
)
from designfields.lib.values import (
    add_option,
    clear_default_option,
    clear_single_value,
    default_placeholder,
    initial_selections,
    remove_option,
    set_default_option,
    set_single_value,
)
from designfields.lib.conditions import (
    add_condition,
    condition_value_choices,
    dependency_candidates,
    evaluate_visibility,
    is_visible,
    remove_condition,
    visible_fields,
)
from designfields.lib.validate import (
    ValidationIssue,
    ValidationSeverity,
    format_validation_report,
    validate_and_raise,
    validate_collection,
)
from designfields.lib.codec import (
    decode_collection,
    decode_field,
    dumps,
    encode_collection,
    encode_field,
    loads,
    read_collection,
    write_collection,
)
from designfields.lib.settings import BuilderSettings, load_settings

__all__ = [
    # Errors
    "DocumentError",
    "FieldConfigError",
    "InvalidInputError",
    "OutOfRangeError",
    # Field store
    "CollectionSummary",
    "add_field",
    "generate_field_id",
    "move_field",
    "remove_field",
    "rename_field",
    "reorder",
    "summarize",
    # Values and defaults
    "add_option",
    "clear_default_option",
    "clear_single_value",
    "default_placeholder",
    "initial_selections",
    "remove_option",
    "set_default_option",
    "set_single_value",
    # Conditions
    "add_condition",
    "condition_value_choices",
    "dependency_candidates",
    "evaluate_visibility",
    "is_visible",
    "remove_condition",
    "visible_fields",
    # Validation
    "ValidationIssue",
    "ValidationSeverity",
    "format_validation_report",
    "validate_and_raise",
    "validate_collection",
    # Codec
    "decode_collection",
    "decode_field",
    "dumps",
    "encode_collection",
    "encode_field",
    "loads",
    "read_collection",
    "write_collection",
    # Settings
    "BuilderSettings",
    "load_settings",
]
