from __future__ import annotations

import html
from datetime import datetime
from typing import Sequence

import streamlit as st

from reclaim_tracker.materials.models import Activity
from reclaim_tracker.ui.styles import card, muted


def render_table_card(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    header_html = "".join(f"<th>{html.escape(str(header))}</th>" for header in headers)
    row_html = []
    for row in rows:
        cells = "".join(f"<td>{cell}</td>" for cell in row)
        row_html.append(f"<tr>{cells}</tr>")

    table_html = f"""
    <table class="ds-table">
        <thead><tr>{header_html}</tr></thead>
        <tbody>
            {''.join(row_html)}
        </tbody>
    </table>
    """
    st.markdown(card(table_html), unsafe_allow_html=True)


def _format_timestamp(value: datetime | None) -> str:
    if value is None:
        return "—"
    return value.strftime("%Y-%m-%d %H:%M")


def render_activity_table(entries: Sequence[Activity], *, show_material: bool = True) -> None:
    if not entries:
        st.markdown(muted("No activity recorded yet."), unsafe_allow_html=True)
        return
    headers = ["When", "Action"]
    if show_material:
        headers.append("Material")
    headers.extend(["By", "Details"])
    rows: list[list[str]] = []
    for entry in entries:
        row = [_format_timestamp(entry.timestamp), f"<strong>{html.escape(entry.action)}</strong>"]
        if show_material:
            row.append(html.escape(entry.material_name or "—"))
        row.append(html.escape(entry.user_name or "—"))
        row.append(html.escape(entry.details or ""))
        rows.append(row)
    render_table_card(headers, rows)
