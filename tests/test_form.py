from __future__ import annotations

from types import SimpleNamespace

import pytest

from reclaim_tracker.materials import form as form_module
from reclaim_tracker.materials.form import DraftForm


@pytest.fixture
def session_state(monkeypatch):
    state = {}
    monkeypatch.setattr(form_module, "st", SimpleNamespace(session_state=state))
    return state


@pytest.fixture
def desk_form(session_state):
    form = DraftForm("edit_1")
    form.load(
        {
            "name": "Desk A",
            "materialType": "DESK",
            "category": "Furniture",
            "condition": "Reusable",
            "color": "Brown",
            "width": 120.0,
            "height": 75.0,
            "depth": 60.0,
            "deskType": "STRAIGHT_DESK",
        }
    )
    return form


def test_backend_errors_show_next_to_their_fields(desk_form):
    desk_form.show_server_errors({"color": "Color is not stocked"})

    assert desk_form.revealed
    assert desk_form.error_for("color") == "Color is not stocked"
    assert desk_form.step_errors(["name", "color"]) == {"color": "Color is not stocked"}


def test_editing_a_field_clears_its_backend_error(desk_form, session_state):
    desk_form.show_server_errors({"color": "Color is not stocked", "name": "Name already used"})

    session_state[desk_form.widget_key("color")] = "Oak"
    desk_form._sync("color")

    assert not desk_form.error_for("color")
    assert desk_form.error_for("name") == "Name already used"


def test_local_rule_takes_precedence_and_reset_drops_backend_errors(desk_form, session_state):
    desk_form.show_server_errors({"name": "Name already used"})
    desk_form.draft["name"] = ""

    assert desk_form.error_for("name") == "Name is required"

    desk_form.reset()
    assert not desk_form.revealed
    assert desk_form.draft == {}
    assert "edit_1_server_errors" not in session_state
