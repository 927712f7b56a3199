from __future__ import annotations

import math
from typing import Any, Mapping

from reclaim_tracker.materials.models import MaterialRecord, parse_material
from reclaim_tracker.materials.taxonomy import (
    ATTRIBUTE_FIELDS,
    BOOLEAN_FIELDS,
    COMMON_REQUIRED_FIELDS,
    NUMERIC_FIELDS,
    field_label,
    get_schema,
)

_TRUE_STRINGS = {"true", "yes", "1", "on"}
_FALSE_STRINGS = {"false", "no", "0", "off"}


class MaterialDraftError(ValueError):
    def __init__(self, errors: Mapping[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(self.errors)
        super().__init__(f"Material draft is not valid: {fields}")


def normalize_draft_value(name: str, raw: Any) -> Any:
    """Convert a UI widget value into the value stored on the draft.

    Select boxes hand booleans over as the strings "true"/"false" and number
    inputs hand over "" when cleared, which must stay missing rather than 0.
    """
    if name in BOOLEAN_FIELDS:
        if raw is None or isinstance(raw, bool):
            return raw
        cleaned = str(raw).strip().lower()
        if cleaned in _TRUE_STRINGS:
            return True
        if cleaned in _FALSE_STRINGS:
            return False
        return None
    if name in NUMERIC_FIELDS:
        if raw is None or isinstance(raw, bool):
            return None
        if isinstance(raw, (int, float)):
            return float(raw)
        cleaned = str(raw).strip()
        if not cleaned:
            return None
        try:
            return float(cleaned.replace(",", "."))
        except ValueError:
            return raw
    return raw


def normalize_draft(draft: Mapping[str, Any]) -> dict[str, Any]:
    return {name: normalize_draft_value(name, value) for name, value in draft.items()}


def _is_missing(name: str, value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if name in NUMERIC_FIELDS and isinstance(value, float) and math.isnan(value):
        return True
    return False


def _number_error(name: str, value: Any) -> str:
    if isinstance(value, bool):
        return f"{field_label(name)} must be a number"
    if isinstance(value, (int, float)):
        return ""
    try:
        float(str(value).strip().replace(",", "."))
    except ValueError:
        return f"{field_label(name)} must be a number"
    return ""


def _is_true(value: Any) -> bool:
    return normalize_draft_value("heightAdjustable", value) is True


def is_field_required(name: str, material_type: str | None, draft: Mapping[str, Any] | None = None) -> bool:
    if name in COMMON_REQUIRED_FIELDS:
        return True
    schema = get_schema(material_type)
    if schema.requires(name):
        return True
    sibling = schema.conditional.get(name)
    if sibling is None:
        return False
    return _is_true((draft or {}).get(sibling))


def validate_field(
    name: str,
    value: Any,
    material_type: str | None,
    draft: Mapping[str, Any] | None = None,
) -> str:
    """Return the error message for one field, or "" when it is acceptable.

    ``material_type`` selects the active attribute schema. ``draft`` is only
    consulted for conditional fields, e.g. ``maximumHeight`` depends on the
    draft's ``heightAdjustable`` flag.
    """
    if name in NUMERIC_FIELDS and not _is_missing(name, value):
        return _number_error(name, value)
    if not is_field_required(name, material_type, draft):
        return ""
    if _is_missing(name, value):
        return f"{field_label(name)} is required"
    return ""


def _as_mapping(draft: MaterialRecord | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(draft, MaterialRecord):
        return draft.model_dump(by_alias=True)
    return dict(draft)


def validate_all(draft: MaterialRecord | Mapping[str, Any]) -> dict[str, str]:
    """Validate every field that applies to the draft's own material type."""
    data = _as_mapping(draft)
    material_type = data.get("materialType")
    schema = get_schema(material_type)
    names = list(COMMON_REQUIRED_FIELDS)
    for name in schema.fields:
        if name not in names:
            names.append(name)

    errors: dict[str, str] = {}
    for name in names:
        message = validate_field(name, data.get(name), material_type, data)
        if message:
            errors[name] = message
    return errors


def prune_draft(draft: Mapping[str, Any]) -> dict[str, Any]:
    """Drop type-specific attributes that do not belong to the active type."""
    schema = get_schema(draft.get("materialType"))
    return {
        name: value
        for name, value in draft.items()
        if name not in ATTRIBUTE_FIELDS or name in schema
    }


def ensure_valid(draft: Mapping[str, Any]) -> dict[str, Any]:
    normalized = normalize_draft(draft)
    errors = validate_all(normalized)
    if errors:
        raise MaterialDraftError(errors)
    return prune_draft(normalized)


def build_record(draft: Mapping[str, Any]) -> MaterialRecord:
    return parse_material(ensure_valid(draft))


__all__ = [
    "MaterialDraftError",
    "build_record",
    "ensure_valid",
    "is_field_required",
    "normalize_draft",
    "normalize_draft_value",
    "prune_draft",
    "validate_all",
    "validate_field",
]
