from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st

from reclaim_client.api_client import XLSX_CONTENT_TYPE, RequestError
from reclaim_tracker.materials.models import ImportSummary
from reclaim_tracker.ui.context import get_client, report_request_error
from reclaim_tracker.ui.layout import footer, main_grid, page_header, section
from reclaim_tracker.ui.styles import inject_global_styles

SUMMARY_KEY = "excel_import_summary"


def import_errors_frame(summary: ImportSummary) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Row": error.row, "Problem": error.message} for error in summary.errors],
        columns=["Row", "Problem"],
    )


def _render_summary(summary: ImportSummary) -> None:
    if summary.imported_count:
        st.success(f"Imported {summary.imported_count} material(s).")
    elif not summary.has_errors:
        st.info("The spreadsheet did not contain any materials.")
    if summary.has_errors:
        st.warning(f"{len(summary.errors)} row(s) were skipped.")
        st.dataframe(import_errors_frame(summary), hide_index=True, use_container_width=True)


def _render_import_section() -> None:
    section("Import from Excel")
    st.caption("Upload an .xlsx file laid out like the template. Each valid row becomes one material.")
    upload = st.file_uploader("Spreadsheet", type=["xlsx"], key="excel_import_file")
    if upload is not None and st.button("Import", type="primary", key="excel_import_submit"):
        try:
            st.session_state[SUMMARY_KEY] = get_client().import_excel(upload.name, upload.getvalue())
        except RequestError as exc:
            report_request_error(exc, "Import")
    summary = st.session_state.get(SUMMARY_KEY)
    if summary is not None:
        _render_summary(summary)


def _render_download(label: str, file_name: str, loader, key: str) -> None:
    if st.button(label, key=f"{key}_prepare", use_container_width=True):
        try:
            st.session_state[key] = loader()
        except RequestError as exc:
            report_request_error(exc, label)
    content = st.session_state.get(key)
    if content:
        st.download_button(
            f"Save {file_name}",
            data=content,
            file_name=file_name,
            mime=XLSX_CONTENT_TYPE,
            use_container_width=True,
            key=f"{key}_download",
        )


def render_excel_operations() -> None:
    inject_global_styles()
    page_header("Excel operations", "Bulk import and export of the inventory.")
    st.divider()

    client = get_client()
    with main_grid("split") as (main, side):
        with main:
            _render_import_section()
        with side:
            section("Downloads")
            _render_download(
                "Export inventory",
                f"materials_{date.today():%Y%m%d}.xlsx",
                client.export_excel,
                "excel_export_content",
            )
            _render_download(
                "Download template",
                "materials_template.xlsx",
                client.download_template,
                "excel_template_content",
            )
    footer()
