from __future__ import annotations

import html

import streamlit as st

from reclaim_client.api_client import PictureUpload, RequestError
from reclaim_tracker.materials.form import BASICS_FIELDS, DraftForm
from reclaim_tracker.materials.taxonomy import (
    BOOLEAN_FIELDS,
    field_label,
    format_material_type,
    option_label,
)
from reclaim_tracker.materials.validation import build_record, validate_all
from reclaim_tracker.routing import material_path
from reclaim_tracker.ui.context import flash, get_client, navigate, report_request_error
from reclaim_tracker.ui.layout import footer, main_grid, page_header, section
from reclaim_tracker.ui.styles import card, inject_global_styles, muted

WIZARD_STEPS = {
    1: "1. Basics",
    2: "2. Dimensions & attributes",
    3: "3. Pictures",
    4: "4. Review",
}

FORM_PREFIX = "import_material"
STEP_KEY = "import_material_step"
PICTURES_KEY = "import_material_pictures"
PRIMARY_KEY = "import_material_primary"
UPLOADER_KEY = "import_material_uploader"
PICTURE_TYPES = ["png", "jpg", "jpeg", "gif", "webp"]


def _form() -> DraftForm:
    return DraftForm(FORM_PREFIX)


def _current_step() -> int:
    if STEP_KEY not in st.session_state:
        st.session_state[STEP_KEY] = 1
    return int(st.session_state[STEP_KEY])


def _set_step(step: int) -> None:
    st.session_state[STEP_KEY] = max(1, min(len(WIZARD_STEPS), step))


def step_fields(step: int, form: DraftForm) -> list[str]:
    """Fields a step owns; advancing past the step validates only these."""
    if step == 1:
        return list(BASICS_FIELDS)
    if step == 2:
        return form.attribute_fields()
    return []


def _clear_wizard() -> None:
    _form().reset()
    for key in (STEP_KEY, PICTURES_KEY, PRIMARY_KEY, UPLOADER_KEY):
        st.session_state.pop(key, None)


def _store_uploads() -> None:
    uploads = st.session_state.get(UPLOADER_KEY) or []
    st.session_state[PICTURES_KEY] = [
        PictureUpload(upload.name, upload.getvalue(), upload.type or "application/octet-stream")
        for upload in uploads
    ]
    st.session_state[PRIMARY_KEY] = 0


def ordered_pictures() -> list[PictureUpload]:
    """Stored uploads with the chosen primary picture first."""
    pictures = list(st.session_state.get(PICTURES_KEY, []))
    primary = int(st.session_state.get(PRIMARY_KEY, 0) or 0)
    if 0 < primary < len(pictures):
        pictures.insert(0, pictures.pop(primary))
    return pictures


def _render_pictures_step() -> None:
    st.file_uploader(
        "Pictures",
        type=PICTURE_TYPES,
        accept_multiple_files=True,
        key=UPLOADER_KEY,
        on_change=_store_uploads,
    )
    pictures = st.session_state.get(PICTURES_KEY, [])
    if not pictures:
        st.markdown(muted("Pictures are optional. The first picture becomes the primary one."), unsafe_allow_html=True)
        return
    st.radio(
        "Primary picture",
        options=list(range(len(pictures))),
        format_func=lambda idx: pictures[idx].file_name,
        key=PRIMARY_KEY,
        horizontal=True,
    )
    columns = st.columns(4)
    for idx, picture in enumerate(pictures):
        columns[idx % 4].image(picture.content, caption=picture.file_name, use_container_width=True)


def _summary_value(name: str, value: object, material_type: str | None) -> str:
    if value is None or value == "":
        return "(none)"
    if name == "materialType":
        return format_material_type(str(value))
    if name in BOOLEAN_FIELDS:
        return "Yes" if value is True else "No"
    if isinstance(value, str):
        return option_label(name, value, material_type)
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _render_review_step(form: DraftForm) -> None:
    names = list(BASICS_FIELDS) + [name for name in form.attribute_fields() if name not in BASICS_FIELDS]
    items = [
        f"<li><strong>{html.escape(field_label(name))}:</strong> "
        f"{html.escape(_summary_value(name, form.draft.get(name), form.material_type))}</li>"
        for name in names
    ]
    pictures = ordered_pictures()
    picture_names = ", ".join(picture.file_name for picture in pictures) or "(none)"
    items.append(f"<li><strong>Pictures:</strong> {html.escape(picture_names)}</li>")
    st.markdown(card(f"<ul class='ds-list'>{''.join(items)}</ul>"), unsafe_allow_html=True)

    if st.button("Create material", type="primary", use_container_width=True, key="import_material_submit"):
        errors = validate_all(form.draft)
        if errors:
            form.reveal_errors(errors)
            for message in errors.values():
                st.error(message)
            return
        try:
            created = get_client().create_material(build_record(form.draft), pictures)
        except RequestError as exc:
            if exc.field_errors:
                form.show_server_errors(exc.field_errors)
            report_request_error(exc, "Creating material")
            return
        _clear_wizard()
        flash(f"Created {created.name}.")
        navigate(material_path(created.id) if created.id is not None else "/materials")


def render_import() -> None:
    inject_global_styles()
    page_header("Import material", "Register one reclaimed item step by step.")
    st.divider()

    form = _form()
    step = _current_step()

    with main_grid("wide") as (main,):
        with main:
            section(WIZARD_STEPS[step])
            st.progress(step / len(WIZARD_STEPS))

            if step == 1:
                form.fields(BASICS_FIELDS)
            elif step == 2:
                if not form.material_type:
                    st.warning("Pick a material type in step 1 first.")
                form.fields(form.attribute_fields(), columns=3)
            elif step == 3:
                _render_pictures_step()
            else:
                _render_review_step(form)

            st.divider()
            back_col, _, next_col = st.columns([1, 2, 1])
            if back_col.button("Back", disabled=step == 1, use_container_width=True, key="import_material_back"):
                _set_step(step - 1)
                st.rerun()
            if step < len(WIZARD_STEPS) and next_col.button(
                "Next", type="primary", use_container_width=True, key="import_material_next"
            ):
                errors = form.step_errors(step_fields(step, form))
                if errors:
                    form.reveal_errors(errors)
                    st.rerun()
                _set_step(step + 1)
                st.rerun()
            if step == 1 and form.revealed and form.step_errors(BASICS_FIELDS):
                st.error("Complete the required fields before continuing.")
            elif step == 2 and form.revealed and form.step_errors(form.attribute_fields()):
                st.error("Complete the required fields before continuing.")

            if st.button("Start over", key="import_material_reset"):
                _clear_wizard()
                st.rerun()
    footer()
