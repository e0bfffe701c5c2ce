"""Encode and decode field collections in the host document format.

The host stores the fields of a design element as a JSON list:

    [
      {"id": "field_finish_1718000000000", "label": "Finish",
       "type": "text", "value": "Matte"},
      {"id": "field_color_1718000000001", "label": "Color",
       "type": "dropdown", "values": ["Red", "Blue"], "defaultValue": "Blue",
       "conditions": [{"fieldId": "field_size_1718000000002", "value": "L"}]}
    ]

``defaultValue`` and ``conditions`` are written only when set. The product
payload nests this list under ``coreDesignElement``; decoding accepts either
shape. Conditions watching a field the document does not contain are
dropped on decode. Raw documents are checked with pydantic models before
they are turned into immutable snapshots, and every snapshot built through
the ``designfields.lib`` functions survives an encode/decode round trip
unchanged.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from designfields.lib.errors import DocumentError
from designfields.lib.validate import ValidationSeverity, validate_collection
from designfields.models import (
    Condition,
    DropdownField,
    FieldCollection,
    FieldKind,
    TextField,
)
from designfields.models.field import Field as FieldDefinition

logger = logging.getLogger(__name__)

__all__ = [
    "NESTED_KEY",
    "decode_collection",
    "decode_field",
    "dumps",
    "encode_collection",
    "encode_field",
    "loads",
    "read_collection",
    "write_collection",
]

NESTED_KEY = "coreDesignElement"

YAML_SUFFIXES = (".yaml", ".yml")


# ============================================
# Pydantic document models
# ============================================


class ConditionDocument(BaseModel):
    """One entry of a field's ``conditions`` list."""

    model_config = ConfigDict(populate_by_name=True)

    field_id: str = Field(..., alias="fieldId", min_length=1, description="Watched field id")
    value: str = Field(..., description="Value the watched field must have")


class FieldDocument(BaseModel):
    """One field as stored by the host."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="Stable field id")
    label: str = Field(..., description="Display label")
    type: FieldKind = Field(..., description="'text' or 'dropdown'")
    value: Optional[str] = Field(default=None, description="Text field value")
    values: Optional[List[str]] = Field(default=None, description="Dropdown options")
    default_value: Optional[str] = Field(
        default=None, alias="defaultValue", description="Dropdown default option"
    )
    conditions: Optional[List[ConditionDocument]] = Field(
        default=None, description="Visibility conditions"
    )


# ============================================
# Encoding
# ============================================


def encode_field(field: FieldDefinition) -> Dict[str, Any]:
    """Convert one field to its host dictionary."""
    data: Dict[str, Any] = {
        "id": field.id,
        "label": field.label,
        "type": field.kind.value,
    }
    if isinstance(field, TextField):
        data["value"] = field.value
        return data

    data["values"] = list(field.options)
    if field.default_option is not None:
        data["defaultValue"] = field.default_option
    if field.conditions:
        data["conditions"] = [
            {"fieldId": c.depends_on, "value": c.required_value}
            for c in field.conditions
        ]
    return data


def encode_collection(snapshot: FieldCollection) -> List[Dict[str, Any]]:
    """Convert a snapshot to the host list of field dictionaries."""
    return [encode_field(f) for f in snapshot]


# ============================================
# Decoding
# ============================================


def decode_field(data: Any) -> FieldDefinition:
    """Build a field from its host dictionary.

    Raises:
        DocumentError: If the dictionary is not a valid field
    """
    try:
        doc = FieldDocument.model_validate(data)
    except ValidationError as e:
        field_id = data.get("id") if isinstance(data, dict) else None
        raise DocumentError(
            f"Invalid field entry: {e.error_count()} problem(s)",
            field_id=field_id if isinstance(field_id, str) else None,
            details={"errors": "; ".join(_format_errors(e))},
        ) from e

    if doc.type is FieldKind.SINGLE:
        return TextField(id=doc.id, label=doc.label, value=doc.value or "")

    conditions = tuple(
        Condition(depends_on=c.field_id, required_value=c.value)
        for c in doc.conditions or ()
    )
    return DropdownField(
        id=doc.id,
        label=doc.label,
        options=tuple(doc.values or ()),
        default_option=doc.default_value,
        conditions=conditions or None,
    )


def decode_collection(data: Any, *, validate: bool = True) -> FieldCollection:
    """Build a snapshot from a host document.

    Args:
        data: List of field dictionaries, or a mapping holding that list
            under ``coreDesignElement``
        validate: Reject documents that break collection invariants
            (duplicate ids, dangling defaults, broken conditions)

    Raises:
        DocumentError: If the document cannot be decoded
    """
    if data is None:
        return FieldCollection()
    if isinstance(data, dict):
        if NESTED_KEY not in data:
            raise DocumentError(f"Mapping document has no '{NESTED_KEY}' key")
        data = data[NESTED_KEY] or []
    if not isinstance(data, list):
        raise DocumentError(
            f"Expected a list of fields, got {type(data).__name__}"
        )

    snapshot = _drop_orphaned_conditions(
        FieldCollection(tuple(decode_field(item) for item in data))
    )

    if validate:
        issues = validate_collection(snapshot)
        errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
        for issue in issues:
            if issue.severity == ValidationSeverity.WARNING:
                logger.warning(str(issue))
        if errors:
            raise DocumentError(
                "Field document breaks collection rules",
                details={"issues": "; ".join(f"{i.field}: {i.message}" for i in errors)},
            )

    logger.debug("Decoded %d field(s)", len(snapshot))
    return snapshot


def _drop_orphaned_conditions(snapshot: FieldCollection) -> FieldCollection:
    """Remove conditions watching fields that are not in the document.

    Host documents keep such conditions after the watched field is deleted.
    They are stripped the same way ``remove_field`` cascades.
    """
    ids = set(snapshot.ids())
    fields = []
    for f in snapshot:
        if isinstance(f, DropdownField) and f.conditions:
            kept = tuple(c for c in f.conditions if c.depends_on in ids)
            if len(kept) != len(f.conditions):
                logger.warning(
                    "Dropped %d condition(s) on %s watching missing fields",
                    len(f.conditions) - len(kept),
                    f.id,
                )
                f = dataclasses.replace(f, conditions=kept or None)
        fields.append(f)
    return FieldCollection(tuple(fields))


def _format_errors(error: ValidationError) -> List[str]:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        messages.append(f"{location}: {item['msg']}")
    return messages


# ============================================
# Text and file helpers
# ============================================


def dumps(snapshot: FieldCollection, fmt: str = "json", *, indent: int = 2) -> str:
    """Serialize a snapshot as JSON or YAML text."""
    encoded = encode_collection(snapshot)
    if fmt == "yaml":
        return yaml.safe_dump(encoded, sort_keys=False, allow_unicode=True)
    if fmt == "json":
        return json.dumps(encoded, indent=indent, ensure_ascii=False) + "\n"
    raise ValueError(f"Unsupported format '{fmt}'. Valid options: json, yaml")


def loads(text: str, fmt: str = "json", *, validate: bool = True) -> FieldCollection:
    """Parse JSON or YAML text into a snapshot.

    Raises:
        DocumentError: If the text is not parseable or not a field document
    """
    try:
        if fmt == "yaml":
            data = yaml.safe_load(text)
        elif fmt == "json":
            data = json.loads(text) if text.strip() else None
        else:
            raise ValueError(f"Unsupported format '{fmt}'. Valid options: json, yaml")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DocumentError(f"Could not parse {fmt} document: {e}") from e
    return decode_collection(data, validate=validate)


def _format_for(path: Path) -> str:
    return "yaml" if path.suffix.lower() in YAML_SUFFIXES else "json"


def read_collection(
    path: Union[str, Path],
    *,
    missing_ok: bool = False,
    validate: bool = True,
) -> FieldCollection:
    """Load a snapshot from a ``.json``, ``.yaml`` or ``.yml`` file.

    Args:
        path: Document path; the suffix selects the format
        missing_ok: Return an empty collection when the file does not exist

    Raises:
        DocumentError: If the file is missing (and not ``missing_ok``) or invalid
    """
    path = Path(path)
    if not path.exists():
        if missing_ok:
            logger.info("No document at %s, starting with an empty collection", path)
            return FieldCollection()
        raise DocumentError("Field document not found", path=str(path))

    text = path.read_text(encoding="utf-8")
    try:
        return loads(text, _format_for(path), validate=validate)
    except DocumentError as e:
        raise DocumentError(
            e.message, path=str(path), field_id=e.field_id, details=e.details
        ) from e


def write_collection(
    path: Union[str, Path],
    snapshot: FieldCollection,
    *,
    indent: int = 2,
) -> Path:
    """Write a snapshot to ``path`` in the format its suffix implies.

    The text is encoded before anything touches the disk and lands through a
    temporary sibling file, so a failed write leaves the old document intact.

    Raises:
        DocumentError: If a label, value or option cannot be encoded as UTF-8
    """
    path = Path(path)
    try:
        data = dumps(snapshot, _format_for(path), indent=indent).encode("utf-8")
    except UnicodeEncodeError as e:
        raise DocumentError(
            "Field document contains text that cannot be saved as UTF-8",
            path=str(path),
            details={"text": repr(e.object[e.start:e.end])},
            suggestion="Re-enter the label or option using valid characters.",
        ) from e

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    tmp_path.write_bytes(data)
    tmp_path.replace(path)
    logger.debug("Wrote %d field(s) to %s", len(snapshot), path)
    return path
