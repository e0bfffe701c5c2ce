"""Ordered, immutable collection of fields.

A ``FieldCollection`` is a snapshot: the builder functions in
``designfields.lib`` take one and return a new one, never mutating the input.
Field order is significant; it is both the display order and the only
ordering persisted to the host.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from designfields.models.field import DropdownField, Field, FieldKind


@dataclass(frozen=True)
class FieldCollection:
    """Snapshot of every field configured for a design element."""

    fields: Tuple[Field, ...] = ()

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __contains__(self, field_id: object) -> bool:
        return any(f.id == field_id for f in self.fields)

    def ids(self) -> List[str]:
        """Field ids in collection order."""
        return [f.id for f in self.fields]

    def get(self, field_id: str) -> Optional[Field]:
        """Return the field with ``field_id`` or None."""
        for f in self.fields:
            if f.id == field_id:
                return f
        return None

    def index_of(self, field_id: str) -> int:
        """Return the position of ``field_id``, or -1 when absent."""
        for index, f in enumerate(self.fields):
            if f.id == field_id:
                return index
        return -1

    def require(self, field_id: str) -> Field:
        """Return the field with ``field_id`` or raise InvalidInputError."""
        from designfields.lib.errors import InvalidInputError

        found = self.get(field_id)
        if found is None:
            raise InvalidInputError(
                f"Unknown field '{field_id}'",
                field_id=field_id,
                suggestion="Reload the collection; the field may have been removed.",
            )
        return found

    def replace(self, updated: Field) -> "FieldCollection":
        """Return a new snapshot with the field sharing ``updated.id`` swapped in."""
        return FieldCollection(
            tuple(updated if f.id == updated.id else f for f in self.fields)
        )

    def dropdowns(self) -> List[DropdownField]:
        """Dropdown fields in collection order."""
        return [f for f in self.fields if f.kind is FieldKind.MULTI]
