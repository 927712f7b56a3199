from __future__ import annotations

import pytest

from reclaim_tracker import routing


@pytest.mark.parametrize(
    ("path", "page"),
    [
        ("/", routing.HOME),
        ("/materials", routing.MATERIALS),
        ("/materials/", routing.MATERIALS),
        ("/import", routing.IMPORT),
        ("/excelOperations", routing.EXCEL_OPERATIONS),
        ("/settings", routing.SETTINGS),
    ],
)
def test_known_routes_when_signed_in(path, page):
    match = routing.resolve_route(path, authenticated=True)

    assert match.page == page
    assert not match.redirected


def test_material_detail_route_extracts_id():
    match = routing.resolve_route("/materials/42", authenticated=True)

    assert match.page == routing.MATERIAL_DETAIL
    assert match.params == {"id": 42}
    assert routing.material_path(42) == "/materials/42"


def test_non_numeric_material_id_goes_to_list():
    match = routing.resolve_route("/materials/abc", authenticated=True)

    assert match.page == routing.MATERIALS
    assert match.redirected


def test_unknown_path_redirects_home():
    match = routing.resolve_route("/does/not/exist", authenticated=True)

    assert (match.path, match.page, match.redirected) == ("/", routing.HOME, True)


@pytest.mark.parametrize("path", ["/", "/materials/3", "/settings", "/nowhere", None])
def test_guard_sends_anonymous_users_to_login(path):
    match = routing.resolve_route(path, authenticated=False)

    assert (match.path, match.page) == ("/login", routing.LOGIN)


def test_login_is_public_and_skipped_when_signed_in():
    assert routing.resolve_route("/login", authenticated=False).page == routing.LOGIN
    assert routing.resolve_route("/login", authenticated=True).page == routing.HOME
