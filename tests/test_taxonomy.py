from __future__ import annotations

from reclaim_tracker.materials import taxonomy


def test_desk_schema_splits_required_conditional_and_optional():
    schema = taxonomy.get_schema("DESK")

    assert schema.required == ("depth", "deskType")
    assert schema.conditional == {"maximumHeight": "heightAdjustable"}
    assert schema.fields == ("depth", "deskType", "heightAdjustable", "maximumHeight")


def test_unknown_type_has_no_extra_fields():
    assert taxonomy.get_schema("SOFA") is taxonomy.EMPTY_SCHEMA
    assert taxonomy.get_schema(None).fields == ()
    assert taxonomy.attribute_fields("") == ()


def test_opening_type_options_depend_on_material_type():
    window = tuple(option.value for option in taxonomy.options_for("openingType", "WINDOW"))
    cabinet = tuple(option.value for option in taxonomy.options_for("openingType", "OFFICE_CABINET"))

    assert "SIDE_HUNG" in window
    assert "SLIDING_DOORS" in cabinet
    assert not set(window) & set(cabinet)
    assert taxonomy.options_for("openingType", "DOOR") == ()


def test_common_options_ignore_material_type():
    assert tuple(option.value for option in taxonomy.options_for("condition")) == ("Reusable", "Repairable", "Damaged")
    assert taxonomy.options_for("category", "DOOR") == taxonomy.CATEGORIES


def test_labels():
    assert taxonomy.field_label("uValue") == "U-value"
    assert taxonomy.field_label("someNewField") == "Some new field"
    assert taxonomy.option_label("deskType", "CORNER_DESK", "DESK") == "Corner Desk"
    assert taxonomy.option_label("deskType", "UNLISTED", "DESK") == "UNLISTED"
    assert taxonomy.format_material_type("OFFICE_CABINET") == "Office Cabinet"
    assert taxonomy.format_material_type("GARDEN_SHED") == "Garden Shed"


def test_normalize_material_type_accepts_tags_labels_and_class_names():
    assert taxonomy.normalize_material_type("DRAWER_UNIT") == "DRAWER_UNIT"
    assert taxonomy.normalize_material_type("DrawerUnit") == "DRAWER_UNIT"
    assert taxonomy.normalize_material_type("office cabinet") == "OFFICE_CABINET"
    assert taxonomy.normalize_material_type("  ") is None
    assert taxonomy.normalize_material_type("Sofa") is None
