from __future__ import annotations

import html

import streamlit as st

BASE_CSS = """
<style>
:root {
    --ds-primary: #1F2937;
    --ds-secondary: #6B7280;
    --ds-bg: #F7F8F5;
    --ds-card-bg: #FFFFFF;
    --ds-border: #E5E7EB;
    --ds-success: #15803D;
    --ds-warning: #B45309;
    --ds-danger: #B91C1C;
    --ds-neutral: #6B7280;
}

.stApp {
    background-color: var(--ds-bg);
    color: var(--ds-primary);
}

.ds-card {
    background: var(--ds-card-bg);
    border: 1px solid var(--ds-border);
    border-radius: 12px;
    padding: 16px;
    box-shadow: 0 2px 8px rgba(0, 0, 0, 0.04);
}

.ds-muted {
    color: var(--ds-secondary);
    font-size: 0.9rem;
}

.ds-pill {
    display: inline-flex;
    align-items: center;
    border-radius: 999px;
    font-size: 0.8rem;
    font-weight: 600;
    padding: 4px 10px;
    letter-spacing: 0.02em;
}

.ds-pill--success {
    background: #DCFCE7;
    color: var(--ds-success);
}

.ds-pill--warning {
    background: #FEF3C7;
    color: var(--ds-warning);
}

.ds-pill--danger {
    background: #FEE2E2;
    color: var(--ds-danger);
}

.ds-pill--neutral {
    background: #F3F4F6;
    color: var(--ds-neutral);
}

.ds-table {
    width: 100%;
    border-collapse: collapse;
}

.ds-table th {
    text-align: left;
    font-size: 0.85rem;
    color: var(--ds-secondary);
    padding-bottom: 8px;
    border-bottom: 1px solid var(--ds-border);
}

.ds-table td {
    padding: 10px 0;
    border-top: 1px solid var(--ds-border);
    vertical-align: top;
}

.ds-list {
    margin: 0;
    padding-left: 1.1rem;
}

.ds-list li {
    margin-bottom: 0.35rem;
}

.ds-field-error {
    color: var(--ds-danger);
    font-size: 0.8rem;
    margin-top: -0.5rem;
}

div[data-testid="stMetric"] {
    background: var(--ds-card-bg);
    border: 1px solid var(--ds-border);
    border-radius: 12px;
    padding: 16px;
    min-height: 110px;
}

.stButton > button,
.stDownloadButton > button {
    min-height: 40px;
    border-radius: 10px;
}
</style>
"""

CONDITION_VARIANTS = {
    "reusable": "success",
    "repairable": "warning",
    "damaged": "danger",
}


def inject_global_styles() -> None:
    """Inject shared design system styles."""
    st.markdown(BASE_CSS, unsafe_allow_html=True)


def card(html_or_markdown: str, *, unsafe_html: bool = True) -> str:
    """Wrap content inside a design system card."""
    content = html_or_markdown if unsafe_html else html.escape(html_or_markdown)
    return f"<div class='ds-card'>{content}</div>"


def muted(text: str) -> str:
    """Return muted caption text."""
    return f"<span class='ds-muted'>{html.escape(text)}</span>"


def field_error(message: str) -> str:
    return f"<div class='ds-field-error'>{html.escape(message)}</div>"


def condition_pill(condition: str | None) -> str:
    """Return a condition pill with semantic coloring."""
    label = str(condition or "Unknown").strip() or "Unknown"
    variant = CONDITION_VARIANTS.get(label.lower(), "neutral")
    return f"<span class='ds-pill ds-pill--{variant}'>{html.escape(label)}</span>"
