from __future__ import annotations

import logging

import streamlit as st

from reclaim_client.api_client import ApiClient, AuthenticationRequired, RequestError
from reclaim_client.config import ClientSettings
from reclaim_client.session import SessionContext

logger = logging.getLogger(__name__)

SETTINGS_KEY = "reclaim_settings"
SESSION_KEY = "reclaim_session"
CLIENT_KEY = "reclaim_client"
PATH_KEY = "reclaim_path"
FLASH_KEY = "reclaim_flash"


def get_settings() -> ClientSettings:
    if SETTINGS_KEY not in st.session_state:
        st.session_state[SETTINGS_KEY] = ClientSettings.from_env()
    return st.session_state[SETTINGS_KEY]


def get_session() -> SessionContext:
    """Return the session for this browser tab, backed by its own session state."""
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = SessionContext(st.session_state).hydrate()
    return st.session_state[SESSION_KEY]


def get_client() -> ApiClient:
    if CLIENT_KEY not in st.session_state:
        st.session_state[CLIENT_KEY] = ApiClient(get_settings(), get_session())
    return st.session_state[CLIENT_KEY]


def current_path() -> str:
    if PATH_KEY not in st.session_state:
        requested = st.query_params.get("path")
        st.session_state[PATH_KEY] = str(requested) if requested else "/"
    return st.session_state[PATH_KEY]


def navigate(path: str) -> None:
    st.session_state[PATH_KEY] = path
    st.rerun()


def flash(message: str) -> None:
    """Queue a toast shown after the next rerun."""
    st.session_state[FLASH_KEY] = message


def show_flash() -> None:
    message = st.session_state.pop(FLASH_KEY, None)
    if message:
        st.toast(message)


def report_request_error(exc: RequestError, action: str) -> None:
    """Turn an API failure into page state.

    A 401 has already cleared the session, so the user is sent to sign in
    again; anything else becomes an error banner and the operation is dropped.
    """
    if isinstance(exc, AuthenticationRequired):
        flash("Your session has expired. Please sign in again.")
        navigate("/login")
        return
    logger.warning("%s failed: %s", action, exc.message)
    st.error(f"{action} failed: {exc.message}")
