from __future__ import annotations

import pytest

from reclaim_api.core.config import Settings
from reclaim_api.models.audit import AuditEntry
from reclaim_api.repositories import users as users_repo
from reclaim_api.schemas.material import MaterialPayload, collect_field_errors
from reclaim_api.services import materials as materials_service
from reclaim_api.services import seed as seed_service
from reclaim_api.services import users as users_service
from reclaim_api.services.errors import InvalidMaterialError, MaterialNotFoundError
from reclaim_api.services.materials import PictureFile


def _window(**overrides):
    data = {
        "name": "Window",
        "category": "Windows",
        "materialType": "WINDOW",
        "condition": "Reusable",
        "color": "White",
        "width": 120,
        "height": 150,
        "depth": 10,
        "openingType": "SIDE_HUNG",
        "hingeSide": "LEFT",
        "uValue": 1.1,
    }
    data.update(overrides)
    return MaterialPayload.model_validate(data)


def test_collect_field_errors_checks_type_options():
    errors = collect_field_errors(
        {
            "name": "Window",
            "category": "Windows",
            "material_type": "WINDOW",
            "condition": "Reusable",
            "color": "White",
            "width": -1,
            "height": 150,
            "depth": 10,
            "opening_type": "DOORS",
        }
    )

    assert errors == {
        "openingType": "Opening type must be one of: FIXED_PANE, TOP_HUNG, SIDE_HUNG, TILT, SLIDING",
        "width": "Width must not be negative",
    }


def test_create_material_rejects_unknown_type(db_session):
    with pytest.raises(InvalidMaterialError) as excinfo:
        materials_service.create_material(db_session, _window(materialType="Sofa"))

    assert "materialType" in excinfo.value.errors


def test_changing_type_clears_stale_attributes(db_session):
    material = materials_service.create_material(db_session, _window())

    updated = materials_service.update_material(
        db_session,
        material.id,
        MaterialPayload.model_validate({"materialType": "DOOR", "swingDirection": "RIGHT"}),
    )

    assert updated.material_type == "DOOR"
    assert updated.swing_direction == "RIGHT"
    assert updated.opening_type is None
    assert updated.hinge_side is None
    assert updated.u_value == 1.1


def test_first_picture_becomes_primary(db_session):
    material = materials_service.create_material(
        db_session,
        _window(),
        pictures=[PictureFile("a.jpg", b"a", "image/jpeg"), PictureFile("empty.jpg", b"", "image/jpeg")],
    )

    assert len(material.pictures) == 1
    assert material.pictures[0].is_primary is True
    entry = db_session.query(AuditEntry).one()
    assert entry.details == "Material created with 1 picture(s)"


def test_delete_missing_material_raises(db_session):
    with pytest.raises(MaterialNotFoundError):
        materials_service.delete_material(db_session, 7)


def test_delete_keeps_audit_snapshot(db_session):
    material = materials_service.create_material(db_session, _window(name="Skylight"))

    materials_service.delete_material(db_session, material.id)

    actions = [(entry.action, entry.material_name) for entry in db_session.query(AuditEntry).order_by(AuditEntry.id)]
    assert actions == [("CREATED", "Skylight"), ("DELETED", "Skylight")]


def test_seed_users_in_dev_mode_creates_admin_and_user(db_session):
    seed_service.seed_users(db_session, Settings(dev_mode=True, admin_email=None, admin_password=None))

    admin = users_repo.get_user_by_email(db_session, "admin@example.com")
    assert admin is not None
    assert admin.role_list == ["ADMIN", "USER"]
    assert users_service.authenticate(db_session, "user@example.com", "user123") is not None


def test_seed_users_requires_credentials_outside_dev_mode(db_session):
    with pytest.raises(RuntimeError, match="ADMIN_PASSWORD"):
        seed_service.seed_users(db_session, Settings(dev_mode=False, admin_email="ops@example.com", admin_password=None))


def test_seed_demo_materials_runs_once(db_session):
    assert seed_service.seed_demo_materials(db_session) == 5
    assert seed_service.seed_demo_materials(db_session) == 0


def test_create_user_rejects_short_password(db_session):
    with pytest.raises(ValueError, match="at least"):
        users_service.create_user(db_session, "someone@example.com", "123")
