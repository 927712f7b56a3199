from __future__ import annotations

import streamlit as st

from reclaim_tracker.ui.context import flash, get_client, get_session, get_settings, navigate
from reclaim_tracker.ui.layout import footer, page_header, section
from reclaim_tracker.ui.styles import inject_global_styles


def render_settings() -> None:
    inject_global_styles()
    page_header("Settings", "Connection and account details.")
    st.divider()

    settings = get_settings()
    session = get_session()

    with st.container(border=True):
        section("API connection")
        st.text_input("API base URL", value=settings.api_base_url, disabled=True)
        st.text_input("Request timeout (s)", value=str(settings.timeout_s), disabled=True)
        st.caption("Set API_BASE_URL and API_TIMEOUT_S in the environment to change these values.")

    with st.container(border=True):
        section("Account")
        user = session.user
        if user is not None:
            st.markdown(f"Signed in as **{user.email}**")
            if user.roles:
                st.caption("Roles: " + ", ".join(user.roles))
        st.caption(f"Session stored in {session.storage_path}")
        if st.button("Sign out", type="primary"):
            get_client().logout()
            flash("Signed out.")
            navigate("/login")
    footer()
