from __future__ import annotations

import html
from typing import Any

import streamlit as st

from reclaim_client.api_client import PictureUpload, RequestError
from reclaim_tracker.materials.filters import FilterState, facet_counts, filter_materials
from reclaim_tracker.materials.form import BASICS_FIELDS, DraftForm
from reclaim_tracker.materials.models import MaterialRecord
from reclaim_tracker.materials.taxonomy import (
    CATEGORIES,
    CONDITIONS,
    MATERIAL_TYPES,
    field_label,
    format_material_type,
    option_label,
)
from reclaim_tracker.materials.validation import ensure_valid, validate_all
from reclaim_tracker.routing import material_path
from reclaim_tracker.ui.components import chip_toggle_group
from reclaim_tracker.ui.context import flash, get_client, navigate, report_request_error
from reclaim_tracker.ui.layout import footer, main_grid, page_header, section
from reclaim_tracker.ui.shared_tables import render_activity_table, render_table_card
from reclaim_tracker.ui.styles import condition_pill, inject_global_styles, muted

QUERY_KEY = "materials_query"
FILTER_KEYS = {
    "categories": "materials_filter_categories",
    "material_types": "materials_filter_types",
    "conditions": "materials_filter_conditions",
}
EDIT_MODE_KEY = "material_edit_id"
PICTURE_TYPES = ["png", "jpg", "jpeg", "gif", "webp"]


def current_filters() -> FilterState:
    """Build the filter state from the widgets of the materials page."""
    state = FilterState(query=str(st.session_state.get(QUERY_KEY, "") or ""))
    for group, key in FILTER_KEYS.items():
        state = state.with_selection(group, st.session_state.get(key, []))  # type: ignore[arg-type]
    return state


def _clear_filters() -> None:
    for key in FILTER_KEYS.values():
        st.session_state[key] = []


def _format_number(value: Any) -> str:
    if value is None:
        return "—"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _dimensions(record: MaterialRecord) -> str:
    parts = [_format_number(record.width), _format_number(record.height)]
    if record.depth is not None:
        parts.append(_format_number(record.depth))
    return " × ".join(parts)


def _render_filter_panel(records: list[MaterialRecord]) -> None:
    counts = facet_counts(records)
    with st.expander("Filters", expanded=True):
        chip_toggle_group(
            "Category",
            CATEGORIES,
            FILTER_KEYS["categories"],
            counts=counts["categories"],
        )
        chip_toggle_group(
            "Type",
            MATERIAL_TYPES,
            FILTER_KEYS["material_types"],
            columns=5,
            counts=counts["material_types"],
        )
        chip_toggle_group(
            "Condition",
            CONDITIONS,
            FILTER_KEYS["conditions"],
            columns=3,
            counts=counts["conditions"],
        )


def _render_active_chips(filters: FilterState) -> None:
    chips = filters.active_chips()
    if not chips:
        return
    labels = []
    for group, value in chips:
        if group == "material_types":
            labels.append(format_material_type(value))
        else:
            labels.append(value)
    chip_col, clear_col = st.columns([5, 1], vertical_alignment="center")
    chip_col.caption("Active filters: " + ", ".join(labels))
    clear_col.button("Clear filters", key="materials_clear_filters", on_click=_clear_filters)


def _material_label(record: MaterialRecord) -> str:
    return record.name or f"Material #{record.id}"


def _render_open_picker(records: list[MaterialRecord]) -> None:
    """Open a material inside the current session so the sign-in state is kept."""
    lookup = {record.id: _material_label(record) for record in records if record.id is not None}
    if not lookup:
        return
    selection = st.selectbox(
        "Open material",
        options=[None, *lookup.keys()],
        format_func=lambda material_id: "(select...)" if material_id is None else lookup[material_id],
        key="materials_open_select",
    )
    if selection is not None:
        st.session_state.pop("materials_open_select", None)
        navigate(material_path(selection))


def _material_rows(records: list[MaterialRecord]) -> list[list[str]]:
    rows = []
    for record in records:
        rows.append(
            [
                f"<strong>{html.escape(_material_label(record))}</strong>",
                html.escape(record.category or "—"),
                html.escape(format_material_type(record.material_type) or "—"),
                condition_pill(record.condition),
                html.escape(record.color or "—"),
                _dimensions(record),
            ]
        )
    return rows


def render_materials_list() -> None:
    inject_global_styles()

    def _actions() -> None:
        if st.button("+ Add material", type="primary", use_container_width=True):
            navigate("/import")

    page_header("Materials", "Search and filter the reclaimed materials inventory.", actions=_actions)

    try:
        records = get_client().list_materials()
    except RequestError as exc:
        report_request_error(exc, "Loading materials")
        return

    st.text_input("Search", key=QUERY_KEY, placeholder="Name, category, type or condition")
    _render_filter_panel(records)
    filters = current_filters()
    _render_active_chips(filters)

    result = filter_materials(records, filters)
    if not result.ok:
        st.error(result.error)
        return

    section("Inventory", count=len(result.records))
    if not records:
        st.markdown(muted("No materials recorded yet."), unsafe_allow_html=True)
    elif not result.records:
        st.markdown(muted("No materials match the current search and filters."), unsafe_allow_html=True)
    else:
        _render_open_picker(result.records)
        render_table_card(
            ["Name", "Category", "Type", "Condition", "Color", "W × H × D"],
            _material_rows(result.records),
        )
    st.caption(f"Showing {len(result.records)} of {len(records)} materials")
    footer()


def _attribute_rows(record: MaterialRecord) -> list[list[str]]:
    rows = [
        ["Category", html.escape(record.category or "—")],
        ["Type", html.escape(format_material_type(record.material_type) or "—")],
        ["Condition", condition_pill(record.condition)],
        ["Color", html.escape(record.color or "—")],
        ["Width", _format_number(record.width)],
        ["Height", _format_number(record.height)],
    ]
    for name, value in record.attributes().items():
        if name == "depth":
            rows.append(["Depth", _format_number(value)])
        elif isinstance(value, bool):
            rows.append([field_label(name), "Yes" if value else "No"])
        elif isinstance(value, str):
            rows.append([field_label(name), html.escape(option_label(name, value, record.material_type))])
        else:
            rows.append([field_label(name), _format_number(value)])
    if record.date_added is not None:
        rows.append(["Added", record.date_added.strftime("%Y-%m-%d %H:%M")])
    if record.notes:
        rows.append(["Notes", html.escape(record.notes)])
    return rows


@st.dialog("Delete material")
def _confirm_delete(record: MaterialRecord) -> None:
    st.write(f"Delete **{record.name}** and all of its pictures? This cannot be undone.")
    confirm_col, cancel_col = st.columns(2)
    if cancel_col.button("Cancel", use_container_width=True):
        st.rerun()
    if confirm_col.button("Delete", type="primary", use_container_width=True):
        try:
            get_client().delete_material(int(record.id))
        except RequestError as exc:
            report_request_error(exc, "Deleting material")
            return
        flash(f"Deleted {record.name}.")
        navigate("/materials")


def _render_pictures(record: MaterialRecord) -> None:
    client = get_client()
    section("Pictures")
    if not record.pictures:
        st.markdown(muted("No pictures uploaded."), unsafe_allow_html=True)
    primary = record.primary_picture
    pictures = sorted(record.pictures, key=lambda picture: picture is not primary)
    columns = st.columns(3)
    for idx, picture in enumerate(pictures):
        with columns[idx % 3]:
            try:
                content = client.get_picture(picture.id)
            except RequestError as exc:
                report_request_error(exc, "Loading picture")
                continue
            caption = f"{picture.file_name} (primary)" if picture is primary else picture.file_name
            st.image(content, caption=caption, use_container_width=True)
            primary_col, delete_col = st.columns(2)
            if picture is not primary and primary_col.button("Set primary", key=f"picture_primary_{picture.id}"):
                try:
                    client.set_primary_picture(int(record.id), picture.id)
                except RequestError as exc:
                    report_request_error(exc, "Updating picture")
                else:
                    st.rerun()
            if delete_col.button("Delete", key=f"picture_delete_{picture.id}"):
                try:
                    client.delete_picture(int(record.id), picture.id)
                except RequestError as exc:
                    report_request_error(exc, "Deleting picture")
                else:
                    st.rerun()

    uploads = st.file_uploader(
        "Add pictures",
        type=PICTURE_TYPES,
        accept_multiple_files=True,
        key=f"picture_upload_{record.id}",
    )
    if uploads and st.button("Upload pictures", key=f"picture_upload_submit_{record.id}"):
        try:
            client.add_pictures(
                int(record.id),
                [PictureUpload(upload.name, upload.getvalue(), upload.type or "application/octet-stream") for upload in uploads],
            )
        except RequestError as exc:
            report_request_error(exc, "Uploading pictures")
        else:
            st.toast(f"Uploaded {len(uploads)} picture(s).")
            st.session_state.pop(f"picture_upload_{record.id}", None)
            st.rerun()


def _render_edit_form(record: MaterialRecord) -> None:
    form = DraftForm(f"edit_{record.id}")
    section("Edit material")
    if form.revealed and form.step_errors([*BASICS_FIELDS, *form.attribute_fields()]):
        st.error("Fix the highlighted fields before saving.")
    form.fields(BASICS_FIELDS)
    form.fields(form.attribute_fields(), columns=3)

    save_col, cancel_col, _ = st.columns([1, 1, 3])
    if cancel_col.button("Cancel", use_container_width=True):
        form.reset()
        st.session_state.pop(EDIT_MODE_KEY, None)
        st.rerun()
    if save_col.button("Save changes", type="primary", use_container_width=True):
        errors = validate_all(form.draft)
        if errors:
            form.reveal_errors(errors)
            st.rerun()
        try:
            get_client().update_material(int(record.id), ensure_valid(form.draft))
        except RequestError as exc:
            if exc.field_errors:
                form.show_server_errors(exc.field_errors)
                st.rerun()
            report_request_error(exc, "Saving material")
            return
        form.reset()
        st.session_state.pop(EDIT_MODE_KEY, None)
        flash("Material saved.")
        st.rerun()


def _start_editing(record: MaterialRecord) -> None:
    DraftForm(f"edit_{record.id}").load(record.model_dump(by_alias=True, exclude={"pictures", "date_added"}))
    st.session_state[EDIT_MODE_KEY] = record.id


def render_material_detail(material_id: int) -> None:
    inject_global_styles()
    try:
        record = get_client().get_material(material_id)
    except RequestError as exc:
        if exc.status == 404:
            page_header("Material not found", f"No material with id {material_id}.")
            if st.button("Back to materials"):
                navigate("/materials")
            return
        report_request_error(exc, "Loading material")
        return

    editing = st.session_state.get(EDIT_MODE_KEY) == record.id

    def _actions() -> None:
        back_col, edit_col, delete_col = st.columns(3)
        if back_col.button("Back", use_container_width=True):
            st.session_state.pop(EDIT_MODE_KEY, None)
            navigate("/materials")
        if not editing and edit_col.button("Edit", use_container_width=True):
            _start_editing(record)
            st.rerun()
        if delete_col.button("Delete", use_container_width=True):
            _confirm_delete(record)

    page_header(record.name or f"Material #{record.id}", format_material_type(record.material_type), actions=_actions)
    st.markdown(condition_pill(record.condition), unsafe_allow_html=True)
    st.divider()

    with main_grid("detail") as (main, side):
        with main:
            if editing:
                _render_edit_form(record)
            else:
                section("Details")
                render_table_card(["Field", "Value"], _attribute_rows(record))
            _render_pictures(record)
        with side:
            section("History")
            try:
                activity = get_client().material_activity(int(record.id))
            except RequestError as exc:
                report_request_error(exc, "Loading history")
            else:
                render_activity_table(activity, show_material=False)
    footer()
