from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager

import streamlit as st

FOOTER_TEXT = "Reclaimed materials inventory"

# (label, value) or (label, value, help text)
Kpi = tuple[str, str | int | float] | tuple[str, str | int | float, str]

_GRID_RATIOS = {
    "split": [3, 1],
    "detail": [2, 1],
}


def page_header(
    title: str,
    subtitle: str = "",
    actions: Callable[[], None] | None = None,
) -> None:
    """Page title with an optional caption and a right-aligned actions slot."""
    col_title, col_actions = st.columns([4, 1], vertical_alignment="bottom")
    with col_title:
        st.markdown(f"## {title}")
        if subtitle:
            st.caption(subtitle)
    with col_actions:
        if actions:
            actions()


def kpi_row(items: Sequence[Kpi]) -> None:
    if not items:
        return
    columns = st.columns(len(items))
    for col, item in zip(columns, items):
        label, value = item[0], item[1]
        col.metric(label, value, help=item[2] if len(item) > 2 else None)


@contextmanager
def main_grid(mode: str = "wide") -> Iterator[tuple[st.delta_generator.DeltaGenerator, ...]]:
    """Yield ``(main,)`` for "wide", or ``(main, side)`` for "split" and "detail"."""
    if mode == "wide":
        yield (st.container(),)
        return
    if mode in _GRID_RATIOS:
        main, side = st.columns(_GRID_RATIOS[mode], gap="large")
        yield (main, side)
        return
    raise ValueError(f"Unknown layout mode: {mode}")


def section(title: str, count: int | None = None) -> None:
    heading = f"### {title}"
    if count is not None:
        heading += f" ({count})"
    st.markdown(heading)


def footer(text: str = FOOTER_TEXT) -> None:
    st.caption(text)


__all__ = ["FOOTER_TEXT", "Kpi", "footer", "kpi_row", "main_grid", "page_header", "section"]
