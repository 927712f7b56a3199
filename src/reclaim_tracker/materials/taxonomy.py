from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Option:
    value: str
    label: str


def _options(*pairs: tuple[str, str]) -> tuple[Option, ...]:
    return tuple(Option(value, label) for value, label in pairs)


CATEGORIES = _options(
    ("Furniture", "Furniture"),
    ("Windows", "Windows"),
    ("Doors", "Doors"),
    ("Storage", "Storage"),
)

MATERIAL_TYPES = _options(
    ("DESK", "Desk"),
    ("WINDOW", "Window"),
    ("DOOR", "Door"),
    ("DRAWER_UNIT", "Drawer Unit"),
    ("OFFICE_CABINET", "Office Cabinet"),
)

CONDITIONS = _options(
    ("Reusable", "Reusable"),
    ("Repairable", "Repairable"),
    ("Damaged", "Damaged"),
)

DESK_TYPES = _options(
    ("CORNER_DESK", "Corner Desk"),
    ("STRAIGHT_DESK", "Straight Desk"),
)

WINDOW_OPENING_TYPES = _options(
    ("FIXED_PANE", "Fixed Pane"),
    ("TOP_HUNG", "Top Hung"),
    ("SIDE_HUNG", "Side Hung"),
    ("TILT", "Tilt"),
    ("SLIDING", "Sliding"),
)

HINGE_SIDES = _options(
    ("RIGHT", "Right"),
    ("LEFT", "Left"),
    ("TOP", "Top"),
    ("BOTTOM", "Bottom"),
    ("NONE", "None"),
)

SWING_DIRECTIONS = _options(
    ("RIGHT", "Right"),
    ("LEFT", "Left"),
)

CABINET_OPENING_TYPES = _options(
    ("DOORS", "Doors"),
    ("SLIDING_DOORS", "Sliding Doors"),
    ("NO_DOORS", "No Doors"),
)

BOOLEAN_OPTIONS = _options(
    ("true", "Yes"),
    ("false", "No"),
)

COMMON_REQUIRED_FIELDS = ("name", "category", "materialType", "condition", "color", "width", "height")
NUMERIC_FIELDS = frozenset({"width", "height", "depth", "maximumHeight", "uValue"})
BOOLEAN_FIELDS = frozenset({"heightAdjustable", "hasWheels"})


FIELD_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "name": "Name",
        "category": "Category",
        "materialType": "Material type",
        "condition": "Condition",
        "color": "Color",
        "notes": "Notes",
        "width": "Width",
        "height": "Height",
        "depth": "Depth",
        "deskType": "Desk type",
        "heightAdjustable": "Height adjustable",
        "maximumHeight": "Maximum height",
        "openingType": "Opening type",
        "hingeSide": "Hinge side",
        "uValue": "U-value",
        "swingDirection": "Swing direction",
        "hasWheels": "Has wheels",
    }
)


@dataclass(frozen=True)
class AttributeSchema:
    """Type-specific attributes of one material type.

    ``required`` fields must always be present, ``conditional`` maps a field to
    the sibling boolean that makes it required, ``optional`` fields are never
    validated. ``options`` lists the allowed values of enumerated fields for
    this type only, so ``openingType`` can differ between windows and cabinets.
    """

    material_type: str
    required: tuple[str, ...] = ()
    conditional: Mapping[str, str] = field(default_factory=dict)
    optional: tuple[str, ...] = ()
    options: Mapping[str, tuple[Option, ...]] = field(default_factory=dict)

    @property
    def fields(self) -> tuple[str, ...]:
        ordered: list[str] = []
        for name in (*self.required, *self.conditional_sources, *self.conditional, *self.optional):
            if name not in ordered:
                ordered.append(name)
        return tuple(ordered)

    @property
    def conditional_sources(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(self.conditional.values()))

    def requires(self, name: str) -> bool:
        return name in self.required

    def __contains__(self, name: object) -> bool:
        return name in self.fields


EMPTY_SCHEMA = AttributeSchema(material_type="")

_SCHEMAS: Mapping[str, AttributeSchema] = MappingProxyType(
    {
        "DESK": AttributeSchema(
            material_type="DESK",
            required=("depth", "deskType"),
            conditional={"maximumHeight": "heightAdjustable"},
            options={"deskType": DESK_TYPES, "heightAdjustable": BOOLEAN_OPTIONS},
        ),
        "WINDOW": AttributeSchema(
            material_type="WINDOW",
            required=("depth", "openingType"),
            optional=("hingeSide", "uValue"),
            options={"openingType": WINDOW_OPENING_TYPES, "hingeSide": HINGE_SIDES},
        ),
        "DOOR": AttributeSchema(
            material_type="DOOR",
            required=("depth", "swingDirection"),
            optional=("uValue",),
            options={"swingDirection": SWING_DIRECTIONS},
        ),
        "OFFICE_CABINET": AttributeSchema(
            material_type="OFFICE_CABINET",
            required=("depth", "openingType"),
            options={"openingType": CABINET_OPENING_TYPES},
        ),
        "DRAWER_UNIT": AttributeSchema(
            material_type="DRAWER_UNIT",
            required=("depth",),
            optional=("hasWheels",),
            options={"hasWheels": BOOLEAN_OPTIONS},
        ),
    }
)

_COMMON_OPTIONS: Mapping[str, tuple[Option, ...]] = MappingProxyType(
    {
        "category": CATEGORIES,
        "materialType": MATERIAL_TYPES,
        "condition": CONDITIONS,
    }
)

ATTRIBUTE_FIELDS = (
    "depth",
    "deskType",
    "heightAdjustable",
    "maximumHeight",
    "openingType",
    "hingeSide",
    "uValue",
    "swingDirection",
    "hasWheels",
)


def get_schema(material_type: str | None) -> AttributeSchema:
    """Return the attribute schema for a material type.

    Unknown or empty types resolve to ``EMPTY_SCHEMA`` so callers fall back to
    the common fields only.
    """
    if not material_type:
        return EMPTY_SCHEMA
    return _SCHEMAS.get(str(material_type), EMPTY_SCHEMA)


def attribute_fields(material_type: str | None) -> tuple[str, ...]:
    return get_schema(material_type).fields


def options_for(name: str, material_type: str | None = None) -> tuple[Option, ...]:
    if name in _COMMON_OPTIONS:
        return _COMMON_OPTIONS[name]
    return get_schema(material_type).options.get(name, ())


def field_label(name: str) -> str:
    if name in FIELD_LABELS:
        return FIELD_LABELS[name]
    spaced = re.sub(r"(?<!^)(?=[A-Z])", " ", name)
    return spaced[:1].upper() + spaced[1:].lower()


def option_label(name: str, value: str | None, material_type: str | None = None) -> str:
    if value is None or value == "":
        return ""
    for option in options_for(name, material_type):
        if option.value == str(value):
            return option.label
    return str(value)


def format_material_type(value: str | None) -> str:
    if not value:
        return ""
    for option in MATERIAL_TYPES:
        if option.value == value:
            return option.label
    return str(value).replace("_", " ").title()


def _squash(value: str) -> str:
    return re.sub(r"[^a-z]", "", value.lower())


_TYPE_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        **{_squash(option.value): option.value for option in MATERIAL_TYPES},
        **{_squash(option.label): option.value for option in MATERIAL_TYPES},
        "cabinet": "OFFICE_CABINET",
        "drawer": "DRAWER_UNIT",
    }
)


def normalize_material_type(value: str | None) -> str | None:
    """Map a tag, label, or spreadsheet class name ("DrawerUnit") to its tag."""
    if value is None:
        return None
    cleaned = str(value).strip()
    if not cleaned:
        return None
    return _TYPE_ALIASES.get(_squash(cleaned))


__all__ = [
    "ATTRIBUTE_FIELDS",
    "AttributeSchema",
    "BOOLEAN_FIELDS",
    "BOOLEAN_OPTIONS",
    "CABINET_OPENING_TYPES",
    "CATEGORIES",
    "COMMON_REQUIRED_FIELDS",
    "CONDITIONS",
    "DESK_TYPES",
    "EMPTY_SCHEMA",
    "HINGE_SIDES",
    "MATERIAL_TYPES",
    "NUMERIC_FIELDS",
    "Option",
    "SWING_DIRECTIONS",
    "WINDOW_OPENING_TYPES",
    "attribute_fields",
    "field_label",
    "format_material_type",
    "get_schema",
    "normalize_material_type",
    "option_label",
    "options_for",
]
