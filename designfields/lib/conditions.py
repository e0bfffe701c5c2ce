"""Visibility conditions between dropdown fields.

A dropdown field may carry conditions of the form "show me only when field
X has value V". A field is visible when it has no conditions or when every
one of its conditions holds (logical AND; there is no OR).

Evaluation is flat: each field is judged from the selected values alone,
never from whether the fields it depends on are themselves visible. A field
watching a hidden field stays visible as long as the hidden field's selected
value still matches.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, List, Mapping, Optional, Tuple

from designfields.lib.errors import InvalidInputError, OutOfRangeError
from designfields.models import (
    Condition,
    DropdownField,
    Field,
    FieldCollection,
)

logger = logging.getLogger(__name__)

__all__ = [
    "add_condition",
    "condition_value_choices",
    "dependency_candidates",
    "evaluate_visibility",
    "is_visible",
    "remove_condition",
    "visible_fields",
]


def _dropdown(snapshot: FieldCollection, field_id: str, role: str) -> DropdownField:
    found = snapshot.require(field_id)
    if not isinstance(found, DropdownField):
        raise InvalidInputError(
            f"The {role} field must be a dropdown",
            field_id=field_id,
            details={"kind": found.kind.value},
        )
    return found


def add_condition(
    snapshot: FieldCollection,
    field_id: str,
    depends_on: str,
    required_value: str,
) -> FieldCollection:
    """Show ``field_id`` only when ``depends_on`` has ``required_value``.

    A field keeps at most one condition per watched field: adding a second
    one for the same ``depends_on`` replaces the first in place.

    Raises:
        InvalidInputError: On self-dependency, an unknown field, a field
            that is not a dropdown, or a blank required value
    """
    if field_id == depends_on:
        raise InvalidInputError(
            "A field cannot depend on itself",
            field_id=field_id,
            suggestion="Pick a different dropdown to depend on.",
        )
    owner = _dropdown(snapshot, field_id, "conditional")
    _dropdown(snapshot, depends_on, "depended-upon")
    if not required_value or not required_value.strip():
        raise InvalidInputError(
            "Condition value must not be empty",
            field_id=field_id,
            value=required_value,
        )

    new_condition = Condition(depends_on=depends_on, required_value=required_value)
    conditions = list(owner.conditions or ())
    for index, existing in enumerate(conditions):
        if existing.depends_on == depends_on:
            conditions[index] = new_condition
            logger.debug("Replaced condition on %s: %s", field_id, new_condition)
            break
    else:
        conditions.append(new_condition)
        logger.debug("Added condition on %s: %s", field_id, new_condition)

    return snapshot.replace(dataclasses.replace(owner, conditions=tuple(conditions)))


def remove_condition(
    snapshot: FieldCollection, field_id: str, index: int
) -> FieldCollection:
    """Remove the condition at ``index``.

    An emptied condition list becomes None, so "no conditions" has one
    representation.

    Raises:
        InvalidInputError: If the field is not a dropdown
        OutOfRangeError: If ``index`` is not a valid condition position
    """
    if field_id not in snapshot:
        return snapshot
    owner = _dropdown(snapshot, field_id, "conditional")

    conditions = owner.conditions or ()
    if not 0 <= index < len(conditions):
        raise OutOfRangeError(
            f"Condition index {index} is outside the condition list",
            index=index,
            length=len(conditions),
            field_id=field_id,
        )

    kept = conditions[:index] + conditions[index + 1:]
    return snapshot.replace(dataclasses.replace(owner, conditions=kept or None))


def is_visible(field: Field, current_values: Mapping[str, Optional[str]]) -> bool:
    """Evaluate one field's conditions against the selected values."""
    if not isinstance(field, DropdownField) or not field.conditions:
        return True
    return all(
        c.is_satisfied(current_values.get(c.depends_on)) for c in field.conditions
    )


def evaluate_visibility(
    snapshot: FieldCollection,
    current_values: Mapping[str, Optional[str]],
) -> Dict[str, bool]:
    """Map every field id to whether the field is currently shown.

    Args:
        snapshot: Collection to evaluate
        current_values: Selected value per field id; missing ids count as
            "nothing selected"

    Returns:
        Dict of field_id -> is_visible, in collection order
    """
    return {f.id: is_visible(f, current_values) for f in snapshot}


def visible_fields(
    snapshot: FieldCollection,
    current_values: Mapping[str, Optional[str]],
) -> List[Field]:
    """Fields currently shown, in collection order."""
    return [f for f in snapshot if is_visible(f, current_values)]


def dependency_candidates(
    snapshot: FieldCollection, field_id: str
) -> List[DropdownField]:
    """Dropdowns a condition on ``field_id`` may watch."""
    return [f for f in snapshot.dropdowns() if f.id != field_id]


def condition_value_choices(
    snapshot: FieldCollection, depends_on: str
) -> Tuple[str, ...]:
    """Options a condition watching ``depends_on`` may require."""
    watched = snapshot.get(depends_on)
    if not isinstance(watched, DropdownField):
        return ()
    return watched.options
