from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import streamlit as st

from reclaim_tracker.materials.taxonomy import Option


def chip_toggle_group(
    label: str,
    options: Sequence[Option],
    state_key: str,
    *,
    columns: int = 4,
    counts: dict[str, int] | None = None,
) -> list[str]:
    """Render toggle chips and return the selected option values in option order."""
    if state_key not in st.session_state:
        st.session_state[state_key] = []

    selected = set(st.session_state.get(state_key, []))

    if label:
        st.markdown(f"**{label}**")

    if not options:
        return list(selected)

    chip_columns = st.columns(columns)
    for idx, option in enumerate(options):
        is_selected = option.value in selected
        label_text = option.label
        if counts is not None:
            label_text = f"{label_text} ({counts.get(option.value, 0)})"
        if chip_columns[idx % columns].button(
            label_text,
            key=f"{state_key}_{idx}",
            type="primary" if is_selected else "secondary",
        ):
            if is_selected:
                selected.remove(option.value)
            else:
                selected.add(option.value)
            st.session_state[state_key] = [opt.value for opt in options if opt.value in selected]
            st.rerun()

    return list(st.session_state.get(state_key, []))


def option_select(
    label: str,
    options: Sequence[Option],
    key: str,
    *,
    value: Any = None,
    placeholder: str = "Select...",
    on_change=None,
) -> str:
    """Selectbox over taxonomy options; "" means nothing chosen."""
    values = [""] + [option.value for option in options]
    labels = {option.value: option.label for option in options}
    labels[""] = placeholder
    current = "" if value is None else str(value)
    if current not in values:
        current = ""
    if key not in st.session_state or st.session_state[key] not in values:
        st.session_state[key] = current
    return st.selectbox(
        label,
        options=values,
        format_func=lambda item: labels.get(item, item),
        key=key,
        on_change=on_change,
    )
