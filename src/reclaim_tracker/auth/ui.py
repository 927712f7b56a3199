from __future__ import annotations

import streamlit as st

from reclaim_client.api_client import RequestError
from reclaim_tracker.ui.context import flash, get_client, navigate
from reclaim_tracker.ui.layout import page_header
from reclaim_tracker.ui.styles import inject_global_styles


def render_login() -> None:
    inject_global_styles()
    _, center, _ = st.columns([1, 2, 1])
    with center:
        page_header("Sign in", "Use your inventory account to continue.")
        with st.form("login_form"):
            email = st.text_input("Email", placeholder="name@example.com")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", type="primary", use_container_width=True)

        if not submitted:
            return
        if not email.strip() or not password:
            st.error("Email and password are required.")
            return
        try:
            user = get_client().login(email.strip(), password)
        except RequestError as exc:
            st.error(exc.message)
            return
        flash(f"Signed in as {user.email}.")
        navigate("/")
