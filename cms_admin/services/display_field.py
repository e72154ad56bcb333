from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cms_admin.core.ids import normalize_record_id
from cms_admin.schemas.content import TEXT_FIELD_TYPES, ContentTypeSchema


ID_FIELD = "id"

# Checked in this order; a later schema field named "title" beats an earlier "name".
NAME_PRIORITY = ("title", "name", "displayName", "label")

SYSTEM_FIELDS = ("createdAt", "updatedAt")
UNNAMED = "Unnamed item"
MAX_DETAIL_FIELDS = 2

RELATED_NAME_PRIORITY = NAME_PRIORITY + ("subject",)
RELATED_SECONDARY_FIELDS = ("description", "email", "bio", "summary")


def resolve_display_field(schema: ContentTypeSchema | None) -> str:
    """
    Pick the field that represents any record of this content type in a picker row.

    1. first name in NAME_PRIORITY that some field carries (case-insensitive)
    2. first text/string/email field in schema order
    3. "id"
    """
    if schema is None or not schema.fields:
        return ID_FIELD

    by_lower = {}
    for f in schema.fields:
        by_lower.setdefault(f.name.lower(), f.name)

    for candidate in NAME_PRIORITY:
        hit = by_lower.get(candidate.lower())
        if hit is not None:
            return hit

    for f in schema.fields:
        if f.type in TEXT_FIELD_TYPES:
            return f.name

    return ID_FIELD


def _is_scalar(v: Any) -> bool:
    return v is not None and not isinstance(v, (dict, list, tuple, set))


def display_value(record: Any, display_field: str) -> str:
    if not isinstance(record, dict):
        return UNNAMED
    value = record.get(display_field)
    if _is_scalar(value) and value != "":
        return str(value)
    rid = normalize_record_id(record.get(ID_FIELD))
    return rid or UNNAMED


@dataclass(frozen=True)
class RecordPreview:
    label: str
    details: list[tuple[str, str]] = field(default_factory=list)


def record_preview(record: Any, display_field: str) -> RecordPreview:
    label = display_value(record, display_field)
    if not isinstance(record, dict):
        return RecordPreview(label=label)

    excluded = {ID_FIELD, display_field, *SYSTEM_FIELDS}
    details = [
        (k, str(v))
        for k, v in record.items()
        if k not in excluded and _is_scalar(v)
    ][:MAX_DETAIL_FIELDS]
    return RecordPreview(label=label, details=details)


@dataclass(frozen=True)
class RelatedItemView:
    item_id: str
    label: str
    content_type_label: str
    secondary: str | None = None


def describe_related(
    item_id: str,
    record: dict[str, Any] | None,
    schema: ContentTypeSchema | None,
    *,
    content_type_id: str = "",
) -> RelatedItemView:
    """
    Compact card for one related record. Missing record or schema degrades to the raw id.
    """
    type_label = (schema.display_name if schema else "") or content_type_id
    if not isinstance(record, dict) or schema is None:
        return RelatedItemView(item_id=item_id, label=item_id, content_type_label=type_label)

    label = None
    for name in RELATED_NAME_PRIORITY:
        if _is_scalar(record.get(name)) and record.get(name) != "":
            label = str(record[name])
            break
    if label is None:
        for f in schema.fields:
            v = record.get(f.name)
            if f.type in TEXT_FIELD_TYPES and _is_scalar(v) and v != "":
                label = str(v)
                break

    secondary = next(
        (str(record[n]) for n in RELATED_SECONDARY_FIELDS if _is_scalar(record.get(n)) and record.get(n) != ""),
        None,
    )
    return RelatedItemView(item_id=item_id, label=label or item_id, content_type_label=type_label, secondary=secondary)
