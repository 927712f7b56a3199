from __future__ import annotations

from typing import Any, Iterable, Mapping

import streamlit as st

from reclaim_tracker.materials.taxonomy import (
    BOOLEAN_FIELDS,
    NUMERIC_FIELDS,
    field_label,
    get_schema,
    options_for,
)
from reclaim_tracker.materials.validation import (
    is_field_required,
    normalize_draft_value,
    validate_field,
)
from reclaim_tracker.ui.components import option_select
from reclaim_tracker.ui.styles import field_error

BASICS_FIELDS = ("name", "materialType", "category", "condition", "color", "notes")
DIMENSION_FIELDS = ("width", "height", "depth")
TEXT_AREA_FIELDS = frozenset({"notes"})


class DraftForm:
    """A material draft kept in ``st.session_state`` under one key prefix.

    Widgets write back into the draft through ``on_change`` callbacks so every
    field change re-runs validation for that field. Errors are shown once a
    field has been touched or after ``reveal_errors`` (a blocked submit).
    """

    def __init__(self, prefix: str):
        self.prefix = prefix

    @property
    def _draft_key(self) -> str:
        return f"{self.prefix}_draft"

    @property
    def _touched_key(self) -> str:
        return f"{self.prefix}_touched"

    @property
    def _reveal_key(self) -> str:
        return f"{self.prefix}_reveal"

    @property
    def _server_key(self) -> str:
        return f"{self.prefix}_server_errors"

    def widget_key(self, name: str) -> str:
        return f"{self.prefix}__{name}"

    @property
    def draft(self) -> dict[str, Any]:
        if self._draft_key not in st.session_state:
            st.session_state[self._draft_key] = {}
        return st.session_state[self._draft_key]

    def load(self, values: dict[str, Any]) -> None:
        """Replace the draft, dropping stale widget state."""
        self.reset()
        st.session_state[self._draft_key] = dict(values)

    def reset(self) -> None:
        for key in list(st.session_state.keys()):
            if str(key).startswith(f"{self.prefix}__"):
                del st.session_state[key]
        st.session_state.pop(self._draft_key, None)
        st.session_state.pop(self._touched_key, None)
        st.session_state.pop(self._reveal_key, None)
        st.session_state.pop(self._server_key, None)

    @property
    def material_type(self) -> str | None:
        return self.draft.get("materialType") or None

    def _touched(self) -> set[str]:
        if self._touched_key not in st.session_state:
            st.session_state[self._touched_key] = set()
        return st.session_state[self._touched_key]

    @property
    def revealed(self) -> bool:
        return bool(st.session_state.get(self._reveal_key))

    def reveal_errors(self, names: Iterable[str]) -> None:
        st.session_state[self._reveal_key] = set(names) | st.session_state.get(self._reveal_key, set())

    def show_server_errors(self, errors: Mapping[str, str]) -> None:
        """Keep errors reported by the backend next to their fields until edited."""
        st.session_state[self._server_key] = dict(errors)
        self.reveal_errors(errors)

    def _sync(self, name: str) -> None:
        raw = st.session_state.get(self.widget_key(name))
        self.draft[name] = normalize_draft_value(name, raw)
        self._touched().add(name)
        st.session_state.get(self._server_key, {}).pop(name, None)

    def error_for(self, name: str) -> str:
        message = validate_field(name, self.draft.get(name), self.material_type, self.draft)
        return message or st.session_state.get(self._server_key, {}).get(name, "")

    def _label(self, name: str) -> str:
        label = field_label(name)
        if is_field_required(name, self.material_type, self.draft):
            return f"{label} *"
        return label

    def _show_error(self, name: str) -> None:
        visible = name in self._touched() or name in st.session_state.get(self._reveal_key, set())
        if not visible:
            return
        message = self.error_for(name)
        if message:
            st.markdown(field_error(message), unsafe_allow_html=True)

    def field(self, name: str) -> None:
        key = self.widget_key(name)
        value = self.draft.get(name)
        options = options_for(name, self.material_type)
        callback = lambda: self._sync(name)  # noqa: E731

        if name in BOOLEAN_FIELDS:
            current = "" if value is None else str(bool(value)).lower()
            option_select(self._label(name), options, key, value=current, on_change=callback)
        elif options:
            if value not in {option.value for option in options}:
                # openingType values differ between windows and cabinets
                self.draft[name] = None
                value = None
            option_select(self._label(name), options, key, value=value, on_change=callback)
        elif name in NUMERIC_FIELDS:
            if key not in st.session_state:
                st.session_state[key] = "" if value is None else f"{value:g}" if isinstance(value, float) else str(value)
            st.text_input(self._label(name), key=key, placeholder="cm", on_change=callback)
        elif name in TEXT_AREA_FIELDS:
            if key not in st.session_state:
                st.session_state[key] = value or ""
            st.text_area(self._label(name), key=key, on_change=callback)
        else:
            if key not in st.session_state:
                st.session_state[key] = value or ""
            st.text_input(self._label(name), key=key, on_change=callback)
        self._show_error(name)

    def fields(self, names: Iterable[str], *, columns: int = 2) -> None:
        names = list(names)
        cols = st.columns(columns)
        for idx, name in enumerate(names):
            with cols[idx % columns]:
                self.field(name)

    def attribute_fields(self) -> list[str]:
        """Dimension and type-specific fields for the current material type."""
        schema = get_schema(self.material_type)
        names = [name for name in DIMENSION_FIELDS if name != "depth" or name in schema]
        names.extend(name for name in schema.fields if name not in names)
        return names

    def step_errors(self, names: Iterable[str]) -> dict[str, str]:
        errors: dict[str, str] = {}
        for name in names:
            message = self.error_for(name)
            if message:
                errors[name] = message
        return errors
