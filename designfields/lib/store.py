"""Structural mutations on a field collection.

Each function takes the current snapshot and returns a new one. Removal is
idempotent: removing something that is not there returns the snapshot as is.

Example:
    >>> snapshot = add_field(FieldCollection(), "Color", FieldKind.MULTI)
    >>> snapshot = reorder(snapshot, 0, 0)
    >>> len(snapshot)
    1
"""

from __future__ import annotations

import dataclasses
import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from designfields.lib.errors import InvalidInputError, OutOfRangeError
from designfields.models import (
    DropdownField,
    FieldCollection,
    FieldKind,
    new_field,
)

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_ID_PREFIX",
    "CollectionSummary",
    "add_field",
    "generate_field_id",
    "move_field",
    "remove_field",
    "rename_field",
    "reorder",
    "summarize",
]

DEFAULT_ID_PREFIX = "field"

_WHITESPACE = re.compile(r"\s+")


def generate_field_id(
    label: str,
    existing: FieldCollection,
    *,
    clock: Optional[Callable[[], float]] = None,
    prefix: str = DEFAULT_ID_PREFIX,
) -> str:
    """Build a unique id from a label and the creation time.

    The id has the form ``{prefix}_{slug}_{millis}``. When the candidate is
    already taken (same label added within one millisecond) the timestamp is
    bumped until the id is free.

    Args:
        label: Field label the slug is derived from
        existing: Snapshot whose ids must not be reused
        clock: Returns seconds since the epoch; defaults to ``time.time``
        prefix: Leading id segment

    Returns:
        An id not present in ``existing``
    """
    slug = _WHITESPACE.sub("_", label.strip().lower())
    millis = int((clock or time.time)() * 1000)
    taken = set(existing.ids())

    candidate = f"{prefix}_{slug}_{millis}"
    while candidate in taken:
        millis += 1
        candidate = f"{prefix}_{slug}_{millis}"
    return candidate


def add_field(
    snapshot: FieldCollection,
    label: str,
    kind: FieldKind,
    *,
    clock: Optional[Callable[[], float]] = None,
    id_prefix: Optional[str] = None,
) -> FieldCollection:
    """Append a new, empty field.

    Raises:
        InvalidInputError: If the label is blank
    """
    if not label or not label.strip():
        raise InvalidInputError(
            "Field label must not be empty",
            value=label,
            suggestion="Enter a label such as Material, Color or Size.",
        )
    try:
        kind = FieldKind(kind)
    except ValueError:
        raise InvalidInputError(
            f"Unknown field kind '{kind}'",
            value=kind,
            suggestion=f"Use one of: {', '.join(k.value for k in FieldKind)}",
        ) from None

    field_id = generate_field_id(
        label,
        snapshot,
        clock=clock,
        prefix=id_prefix or DEFAULT_ID_PREFIX,
    )
    logger.debug("Added field %s (%s)", field_id, kind.value)
    return FieldCollection(snapshot.fields + (new_field(field_id, label, kind),))


def remove_field(snapshot: FieldCollection, field_id: str) -> FieldCollection:
    """Remove a field and every condition that depends on it."""
    if field_id not in snapshot:
        logger.debug("Remove skipped, no field %s", field_id)
        return snapshot

    remaining = []
    for f in snapshot:
        if f.id == field_id:
            continue
        if isinstance(f, DropdownField) and f.condition_for(field_id) is not None:
            kept = tuple(c for c in f.conditions if c.depends_on != field_id)
            f = dataclasses.replace(f, conditions=kept or None)
            logger.debug("Dropped condition on %s watching %s", f.id, field_id)
        remaining.append(f)

    logger.debug("Removed field %s", field_id)
    return FieldCollection(tuple(remaining))


def rename_field(
    snapshot: FieldCollection, field_id: str, new_label: str
) -> FieldCollection:
    """Change a field's label; unknown ids are ignored."""
    current = snapshot.get(field_id)
    if current is None:
        return snapshot
    return snapshot.replace(dataclasses.replace(current, label=new_label))


def reorder(
    snapshot: FieldCollection, from_index: int, to_index: int
) -> FieldCollection:
    """Move the field at ``from_index`` to ``to_index``.

    Fields in between shift by one position and keep their relative order.

    Raises:
        OutOfRangeError: If either index is outside ``[0, len(snapshot))``
    """
    length = len(snapshot)
    for name, index in (("from_index", from_index), ("to_index", to_index)):
        if not 0 <= index < length:
            raise OutOfRangeError(
                f"{name} {index} is outside the collection",
                index=index,
                length=length,
            )
    if from_index == to_index:
        return snapshot

    fields = list(snapshot.fields)
    moved = fields.pop(from_index)
    fields.insert(to_index, moved)
    logger.debug("Moved field %s from %d to %d", moved.id, from_index, to_index)
    return FieldCollection(tuple(fields))


def move_field(
    snapshot: FieldCollection, active_id: str, over_id: str
) -> FieldCollection:
    """Move the dragged field onto the position of the field it was dropped on.

    A drop onto itself or involving an unknown id changes nothing.
    """
    if active_id == over_id:
        return snapshot
    old_index = snapshot.index_of(active_id)
    new_index = snapshot.index_of(over_id)
    if old_index == -1 or new_index == -1:
        return snapshot
    return reorder(snapshot, old_index, new_index)


@dataclass(frozen=True)
class CollectionSummary:
    """Field counts for a snapshot."""

    total: int
    by_kind: Dict[FieldKind, int]

    @property
    def dropdowns(self) -> int:
        return self.by_kind.get(FieldKind.MULTI, 0)

    def __str__(self) -> str:
        text = f"Total Fields: {self.total}"
        if self.dropdowns:
            text += f" | Dropdowns: {self.dropdowns}"
        return text


def summarize(snapshot: FieldCollection) -> CollectionSummary:
    """Count fields in total and per kind."""
    by_kind = {kind: 0 for kind in FieldKind}
    for f in snapshot:
        by_kind[f.kind] += 1
    return CollectionSummary(total=len(snapshot), by_kind=by_kind)
