from __future__ import annotations

import pytest

from reclaim_tracker.materials.models import DeskRecord, DrawerUnitRecord
from reclaim_tracker.materials.validation import (
    MaterialDraftError,
    build_record,
    ensure_valid,
    normalize_draft_value,
    prune_draft,
    validate_all,
    validate_field,
)


def desk_draft(**overrides):
    draft = {
        "name": "Desk A",
        "materialType": "DESK",
        "category": "Furniture",
        "condition": "Reusable",
        "color": "Brown",
        "width": 120,
        "height": 75,
        "depth": 60,
        "deskType": "STRAIGHT_DESK",
        "heightAdjustable": False,
    }
    draft.update(overrides)
    return draft


COMPLETE_DRAFTS = {
    "DESK": desk_draft(),
    "WINDOW": {
        "name": "Window",
        "materialType": "WINDOW",
        "category": "Windows",
        "condition": "Reusable",
        "color": "White",
        "width": 120,
        "height": 150,
        "depth": 10,
        "openingType": "TILT",
    },
    "DOOR": {
        "name": "Door",
        "materialType": "DOOR",
        "category": "Doors",
        "condition": "Repairable",
        "color": "Oak",
        "width": 90,
        "height": 210,
        "depth": 4,
        "swingDirection": "LEFT",
    },
    "OFFICE_CABINET": {
        "name": "Cabinet",
        "materialType": "OFFICE_CABINET",
        "category": "Storage",
        "condition": "Damaged",
        "color": "Grey",
        "width": 80,
        "height": 180,
        "depth": 40,
        "openingType": "NO_DOORS",
    },
    "DRAWER_UNIT": {
        "name": "Drawers",
        "materialType": "DRAWER_UNIT",
        "category": "Storage",
        "condition": "Reusable",
        "color": "Black",
        "width": 60,
        "height": 75,
        "depth": 45,
    },
}

TYPE_REQUIRED = {
    "DESK": ("depth", "deskType"),
    "WINDOW": ("depth", "openingType"),
    "DOOR": ("depth", "swingDirection"),
    "OFFICE_CABINET": ("depth", "openingType"),
    "DRAWER_UNIT": ("depth",),
}


def test_complete_desk_is_valid():
    assert validate_all(desk_draft()) == {}


def test_desk_without_desk_type():
    draft = desk_draft()
    del draft["deskType"]

    assert validate_all(draft) == {"deskType": "Desk type is required"}


@pytest.mark.parametrize("material_type", sorted(COMPLETE_DRAFTS))
def test_complete_draft_per_type_is_valid(material_type):
    assert validate_all(COMPLETE_DRAFTS[material_type]) == {}


@pytest.mark.parametrize(
    ("material_type", "field"),
    [(material_type, field) for material_type, fields in TYPE_REQUIRED.items() for field in fields]
    + [(material_type, "color") for material_type in TYPE_REQUIRED],
)
def test_missing_required_field_is_reported(material_type, field):
    draft = dict(COMPLETE_DRAFTS[material_type])
    draft.pop(field)

    assert field in validate_all(draft)


def test_maximum_height_follows_height_adjustable():
    assert validate_all(desk_draft(heightAdjustable=True)) == {"maximumHeight": "Maximum height is required"}
    assert validate_all(desk_draft(heightAdjustable=True, maximumHeight=120)) == {}
    assert validate_all(desk_draft(heightAdjustable=False, maximumHeight=None)) == {}


@pytest.mark.parametrize("material_type", [None, "DESK", "WINDOW", "DOOR", "OFFICE_CABINET", "DRAWER_UNIT"])
def test_maximum_height_never_required_when_not_adjustable(material_type):
    assert validate_field("maximumHeight", None, material_type, {"heightAdjustable": False}) == ""


def test_empty_and_whitespace_values_are_missing():
    assert validate_field("name", "   ", "DESK") == "Name is required"
    assert validate_field("width", "", "DESK") == "Width is required"
    assert validate_field("width", 0, "DESK") == ""


def test_non_numeric_dimension_is_rejected():
    assert validate_field("width", "wide", "DESK") == "Width must be a number"
    assert validate_field("uValue", "abc", "WINDOW") == "U-value must be a number"


def test_depth_is_optional_without_a_type():
    assert validate_field("depth", None, None) == ""
    assert validate_field("depth", None, "DOOR") == "Depth is required"


def test_boolean_strings_are_normalized():
    assert normalize_draft_value("heightAdjustable", "true") is True
    assert normalize_draft_value("hasWheels", "false") is False
    assert normalize_draft_value("hasWheels", "") is None
    assert normalize_draft_value("width", "12,5") == 12.5
    assert normalize_draft_value("width", "") is None


def test_adjustable_flag_as_string_still_requires_maximum_height():
    assert validate_all(desk_draft(heightAdjustable="true")) == {"maximumHeight": "Maximum height is required"}


def test_prune_draft_drops_other_types_attributes():
    pruned = prune_draft(desk_draft(swingDirection="LEFT", hasWheels=True, notes="ok"))

    assert "swingDirection" not in pruned
    assert "hasWheels" not in pruned
    assert pruned["notes"] == "ok"
    assert pruned["deskType"] == "STRAIGHT_DESK"


def test_ensure_valid_raises_with_field_errors():
    with pytest.raises(MaterialDraftError) as excinfo:
        ensure_valid(desk_draft(name="", deskType=None))

    assert set(excinfo.value.errors) == {"name", "deskType"}


def test_build_record_returns_type_variant():
    record = build_record(desk_draft(heightAdjustable="true", maximumHeight="110"))

    assert isinstance(record, DeskRecord)
    assert record.height_adjustable is True
    assert record.maximum_height == 110.0

    drawers = build_record({**COMPLETE_DRAFTS["DRAWER_UNIT"], "hasWheels": "true"})
    assert isinstance(drawers, DrawerUnitRecord)
    assert drawers.has_wheels is True


def test_validate_all_accepts_records():
    assert validate_all(DeskRecord.model_validate(desk_draft())) == {}


def test_built_record_payload_has_only_active_type_fields():
    record = build_record(desk_draft(openingType="SIDE_HUNG", hasWheels=True))

    payload = record.to_payload()

    assert "id" not in payload
    assert "openingType" not in payload
    assert "hasWheels" not in payload
    assert payload["deskType"] == "STRAIGHT_DESK"
    assert payload["materialType"] == "DESK"
