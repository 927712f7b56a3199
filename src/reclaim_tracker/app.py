from __future__ import annotations

import logging
import sys
from pathlib import Path

# Ensure "src" is on PYTHONPATH when running via:
# streamlit run src/reclaim_tracker/app.py
SRC_DIR = Path(__file__).resolve().parents[1]  # .../src
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import streamlit as st  # noqa: E402

from reclaim_client.config import get_env  # noqa: E402
from reclaim_tracker import routing  # noqa: E402
from reclaim_tracker.auth.ui import render_login  # noqa: E402
from reclaim_tracker.excel.ui import render_excel_operations  # noqa: E402
from reclaim_tracker.home.ui import render_home  # noqa: E402
from reclaim_tracker.imports.ui import render_import  # noqa: E402
from reclaim_tracker.materials.ui import render_material_detail, render_materials_list  # noqa: E402
from reclaim_tracker.settings.ui import render_settings  # noqa: E402
from reclaim_tracker.ui.context import PATH_KEY, current_path, get_session, navigate, show_flash  # noqa: E402

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _configure_logging() -> None:
    level_name = get_env("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)


def _apply_nav_query_params() -> None:
    path_value = st.query_params.get("path")
    if isinstance(path_value, list):
        path_value = path_value[0] if path_value else None
    if path_value:
        st.session_state[PATH_KEY] = str(path_value)
        st.query_params.clear()
        st.rerun()


def _render_sidebar(active_path: str) -> None:
    st.sidebar.title("Navigation")
    user = get_session().user
    if user is not None:
        st.sidebar.markdown(f"**{user.email}**")
    for label, path in routing.NAV_ITEMS:
        is_active = active_path == path or (path == "/materials" and active_path.startswith("/materials/"))
        if st.sidebar.button(
            label,
            key=f"nav_{path}",
            type="primary" if is_active else "secondary",
            use_container_width=True,
        ):
            navigate(path)


def main() -> None:
    st.set_page_config(page_title="Reclaimed Materials", layout="wide")
    _configure_logging()
    _apply_nav_query_params()

    session = get_session()
    match = routing.resolve_route(current_path(), session.is_authenticated)
    if match.redirected:
        st.session_state[PATH_KEY] = match.path

    show_flash()
    if match.page == routing.LOGIN:
        render_login()
        return

    _render_sidebar(match.path)
    if match.page == routing.MATERIALS:
        render_materials_list()
    elif match.page == routing.MATERIAL_DETAIL:
        render_material_detail(match.params["id"])
    elif match.page == routing.IMPORT:
        render_import()
    elif match.page == routing.EXCEL_OPERATIONS:
        render_excel_operations()
    elif match.page == routing.SETTINGS:
        render_settings()
    else:
        render_home()


if __name__ == "__main__":
    main()
