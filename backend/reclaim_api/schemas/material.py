from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

CATEGORY_OPTIONS = ("Furniture", "Windows", "Doors", "Storage")
CONDITION_OPTIONS = ("Reusable", "Repairable", "Damaged")
MATERIAL_TYPE_OPTIONS = ("DESK", "WINDOW", "DOOR", "DRAWER_UNIT", "OFFICE_CABINET")

# Spreadsheets and older clients use class-style names ("DrawerUnit").
MATERIAL_TYPE_LABELS = {
    "DESK": "Desk",
    "WINDOW": "Window",
    "DOOR": "Door",
    "DRAWER_UNIT": "DrawerUnit",
    "OFFICE_CABINET": "OfficeCabinet",
}

ATTRIBUTE_OPTIONS: dict[str, dict[str, tuple[str, ...]]] = {
    "DESK": {"desk_type": ("CORNER_DESK", "STRAIGHT_DESK")},
    "WINDOW": {
        "opening_type": ("FIXED_PANE", "TOP_HUNG", "SIDE_HUNG", "TILT", "SLIDING"),
        "hinge_side": ("RIGHT", "LEFT", "TOP", "BOTTOM", "NONE"),
    },
    "DOOR": {"swing_direction": ("RIGHT", "LEFT")},
    "OFFICE_CABINET": {"opening_type": ("DOORS", "SLIDING_DOORS", "NO_DOORS")},
    "DRAWER_UNIT": {},
}

COMMON_REQUIRED = ("name", "category", "material_type", "condition", "color", "width", "height")

TYPE_REQUIRED: dict[str, tuple[str, ...]] = {
    "DESK": ("depth", "desk_type"),
    "WINDOW": ("depth", "opening_type"),
    "DOOR": ("depth", "swing_direction"),
    "OFFICE_CABINET": ("depth", "opening_type"),
    "DRAWER_UNIT": ("depth",),
}

TYPE_OPTIONAL: dict[str, tuple[str, ...]] = {
    "DESK": ("height_adjustable", "maximum_height"),
    "WINDOW": ("hinge_side", "u_value"),
    "DOOR": ("u_value",),
    "OFFICE_CABINET": (),
    "DRAWER_UNIT": ("has_wheels",),
}

ATTRIBUTE_COLUMNS = (
    "depth",
    "desk_type",
    "height_adjustable",
    "maximum_height",
    "opening_type",
    "hinge_side",
    "u_value",
    "swing_direction",
    "has_wheels",
)

FIELD_LABELS = {
    "name": "Name",
    "category": "Category",
    "material_type": "Material type",
    "condition": "Condition",
    "color": "Color",
    "width": "Width",
    "height": "Height",
    "depth": "Depth",
    "desk_type": "Desk type",
    "height_adjustable": "Height adjustable",
    "maximum_height": "Maximum height",
    "opening_type": "Opening type",
    "hinge_side": "Hinge side",
    "u_value": "U-value",
    "swing_direction": "Swing direction",
    "has_wheels": "Has wheels",
}


def normalize_material_type(value: Any) -> str | None:
    """Accept ``DRAWER_UNIT``, ``DrawerUnit`` or ``Drawer Unit``."""
    if value is None:
        return None
    squashed = re.sub(r"[^a-z]", "", str(value).lower())
    if not squashed:
        return None
    for tag, label in MATERIAL_TYPE_LABELS.items():
        if squashed in {tag.replace("_", "").lower(), label.lower()}:
            return tag
    return str(value).strip()


def attribute_columns(material_type: str | None) -> tuple[str, ...]:
    return TYPE_REQUIRED.get(material_type or "", ()) + TYPE_OPTIONAL.get(material_type or "", ())


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def collect_field_errors(data: dict[str, Any]) -> dict[str, str]:
    """Validate a merged material, keyed by camelCase field name.

    Mirrors the form rules: common fields always required, type attributes
    required per type, ``maximumHeight`` required for adjustable desks, and
    enumerated values checked against the type's options.
    """
    errors: dict[str, str] = {}
    material_type = data.get("material_type")

    for name in COMMON_REQUIRED:
        if _is_missing(data.get(name)):
            errors[to_camel(name)] = f"{FIELD_LABELS[name]} is required"

    if not _is_missing(data.get("category")) and data["category"] not in CATEGORY_OPTIONS:
        errors["category"] = f"Category must be one of: {', '.join(CATEGORY_OPTIONS)}"
    if not _is_missing(data.get("condition")) and data["condition"] not in CONDITION_OPTIONS:
        errors["condition"] = f"Condition must be one of: {', '.join(CONDITION_OPTIONS)}"
    if not _is_missing(material_type) and material_type not in MATERIAL_TYPE_OPTIONS:
        errors["materialType"] = f"Material type must be one of: {', '.join(MATERIAL_TYPE_LABELS.values())}"
        return errors

    required = list(TYPE_REQUIRED.get(material_type or "", ()))
    if material_type == "DESK" and data.get("height_adjustable") is True:
        required.append("maximum_height")
    for name in required:
        if _is_missing(data.get(name)):
            errors[to_camel(name)] = f"{FIELD_LABELS[name]} is required"

    for name, allowed in ATTRIBUTE_OPTIONS.get(material_type or "", {}).items():
        value = data.get(name)
        if not _is_missing(value) and value not in allowed:
            errors[to_camel(name)] = f"{FIELD_LABELS[name]} must be one of: {', '.join(allowed)}"

    for name in ("width", "height", "depth", "maximum_height", "u_value"):
        value = data.get(name)
        if isinstance(value, (int, float)) and value < 0:
            errors[to_camel(name)] = f"{FIELD_LABELS[name]} must not be negative"
    return errors


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MaterialPayload(CamelModel):
    """Create or partial-update body; unknown keys are ignored."""

    name: str | None = None
    category: str | None = None
    material_type: str | None = None
    condition: str | None = None
    color: str | None = None
    notes: str | None = None
    width: float | None = None
    height: float | None = None
    depth: float | None = None
    desk_type: str | None = None
    height_adjustable: bool | None = None
    maximum_height: float | None = None
    opening_type: str | None = None
    hinge_side: str | None = None
    u_value: float | None = None
    swing_direction: str | None = None
    has_wheels: bool | None = None

    @field_validator("material_type", mode="before")
    @classmethod
    def canonical_material_type(cls, value: Any) -> Any:
        return normalize_material_type(value)

    @field_validator("name", "category", "condition", "color", "notes", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value


class PictureRead(CamelModel):
    id: int
    file_name: str
    content_type: str
    file_size: int
    upload_date: datetime | None = None
    is_primary: bool = False
    description: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MaterialRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    name: str
    category: str
    material_type: str
    condition: str
    color: str | None = None
    notes: str | None = None
    date_added: datetime | None = None
    width: float | None = None
    height: float | None = None
    depth: float | None = None
    desk_type: str | None = None
    height_adjustable: bool | None = None
    maximum_height: float | None = None
    opening_type: str | None = None
    hinge_side: str | None = None
    u_value: float | None = None
    swing_direction: str | None = None
    has_wheels: bool | None = None
    pictures: list[PictureRead] = Field(default_factory=list)


class MaterialPage(CamelModel):
    content: list[MaterialRead]
    total_elements: int
    total_pages: int
    number: int
    size: int


class MaterialStatsRead(CamelModel):
    total_count: int
    condition_counts: dict[str, int]
    type_counts: dict[str, int]
    category_counts: dict[str, int]
    recent_additions_count: int


class ImportRowErrorRead(CamelModel):
    row: int
    message: str


class ImportSummaryRead(CamelModel):
    imported_count: int
    errors: list[ImportRowErrorRead] = Field(default_factory=list)
