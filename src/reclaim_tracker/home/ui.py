from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from reclaim_client.api_client import RequestError
from reclaim_tracker.materials.models import MaterialStats
from reclaim_tracker.materials.taxonomy import format_material_type
from reclaim_tracker.ui.context import get_client, navigate, report_request_error
from reclaim_tracker.ui.layout import footer, kpi_row, main_grid, page_header, section
from reclaim_tracker.ui.shared_tables import render_activity_table
from reclaim_tracker.ui.styles import inject_global_styles

CONDITION_COLORS = {
    "Reusable": "#15803D",
    "Repairable": "#B45309",
    "Damaged": "#B91C1C",
}


def counts_frame(counts: dict[str, int], *, label: str) -> pd.DataFrame:
    """Turn a stats count map into a sorted frame for charting."""
    if not counts:
        return pd.DataFrame(columns=[label, "count"])
    df = pd.DataFrame(sorted(counts.items()), columns=[label, "count"])
    return df.sort_values("count", ascending=False, kind="stable").reset_index(drop=True)


def _build_bar_chart(df: pd.DataFrame, label: str, *, colors: dict[str, str] | None = None) -> go.Figure:
    fig = go.Figure(
        go.Bar(
            x=df[label],
            y=df["count"],
            marker_color=[(colors or {}).get(value, "#1F2937") for value in df[label]],
            hovertemplate=f"%{{x}}<br>Materials: %{{y}}<extra></extra>",
        )
    )
    fig.update_layout(height=300, margin=dict(l=20, r=20, t=20, b=20))
    fig.update_xaxes(title=None, type="category")
    fig.update_yaxes(title="Materials", rangemode="tozero")
    return fig


def _render_kpis(stats: MaterialStats) -> None:
    kpi_row(
        [
            ("Total materials", stats.total_count),
            ("Reusable", stats.condition_counts.get("Reusable", 0)),
            ("Repairable", stats.condition_counts.get("Repairable", 0)),
            ("Damaged", stats.condition_counts.get("Damaged", 0)),
            ("Added in last 30 days", stats.recent_additions_count, "Materials whose date added falls in the last 30 days"),
        ]
    )


def _render_charts(stats: MaterialStats) -> None:
    condition_df = counts_frame(stats.condition_counts, label="condition")
    type_df = counts_frame(
        {format_material_type(key): value for key, value in stats.type_counts.items()},
        label="type",
    )
    left, right = st.columns(2)
    with left:
        section("By condition")
        if condition_df.empty:
            st.info("No materials recorded yet.")
        else:
            st.plotly_chart(_build_bar_chart(condition_df, "condition", colors=CONDITION_COLORS), use_container_width=True)
    with right:
        section("By type")
        if type_df.empty:
            st.info("No materials recorded yet.")
        else:
            st.plotly_chart(_build_bar_chart(type_df, "type"), use_container_width=True)


def render_home() -> None:
    inject_global_styles()

    def _actions() -> None:
        if st.button("+ Add material", type="primary", use_container_width=True):
            navigate("/import")

    page_header("Dashboard", "Reclaimed materials at a glance.", actions=_actions)
    client = get_client()

    try:
        stats = client.get_stats()
    except RequestError as exc:
        report_request_error(exc, "Loading statistics")
        stats = None

    with main_grid("split") as (main, side):
        with main:
            if stats is not None:
                _render_kpis(stats)
                st.divider()
                _render_charts(stats)
        with side:
            section("Recent activity")
            try:
                activity = client.recent_activity()
            except RequestError as exc:
                report_request_error(exc, "Loading activity")
            else:
                render_activity_table(activity)

    footer("Counts come from the server and include every stored material.")
