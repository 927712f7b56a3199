from __future__ import annotations

from reclaim_client.config import ClientSettings
from reclaim_client.session import AUTH_STATE_KEY, SessionContext
from reclaim_tracker.materials.models import SessionUser


def test_establish_persists_and_hydrate_restores():
    store = {}
    SessionContext(store).establish("abc", SessionUser(id=1, email="admin@example.com", roles=["ADMIN", "USER"]))

    restored = SessionContext(store).hydrate()

    assert restored.is_authenticated
    assert restored.token == "abc"
    assert restored.user.roles == ["ADMIN", "USER"]
    assert restored.auth_header() == {"Authorization": "Bearer abc"}


def test_separate_browser_sessions_do_not_share_login():
    alice_tab = {}
    bob_tab = {}
    SessionContext(alice_tab).establish("alice-token", SessionUser(id=1, email="alice@example.com", roles=["USER"]))

    bob = SessionContext(bob_tab).hydrate()

    assert not bob.is_authenticated
    assert bob.user is None
    assert bob.auth_header() == {}


def test_logout_in_one_session_keeps_other_signed_in():
    alice_tab = {}
    bob_tab = {}
    alice = SessionContext(alice_tab)
    alice.establish("alice-token", None)
    SessionContext(bob_tab).establish("bob-token", None)

    alice.clear()

    assert SessionContext(bob_tab).hydrate().token == "bob-token"
    assert not SessionContext(alice_tab).hydrate().is_authenticated


def test_clear_removes_token(session_context):
    session_context.establish("abc", None)

    session_context.clear()

    assert not session_context.is_authenticated
    assert session_context.auth_header() == {}
    assert AUTH_STATE_KEY not in session_context.store
    session_context.clear()


def test_hydrate_ignores_corrupt_state():
    store = {AUTH_STATE_KEY: {"token": "abc", "user": {"email": 42}}}

    assert not SessionContext(store).hydrate().is_authenticated
    assert AUTH_STATE_KEY not in store


def test_hydrate_ignores_missing_token():
    store = {AUTH_STATE_KEY: {"token": "", "user": None}}

    assert not SessionContext(store).hydrate().is_authenticated


def test_client_settings_from_env(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "http://api.local/api/")
    monkeypatch.setenv("API_TIMEOUT_S", "oops")

    settings = ClientSettings.from_env()

    assert settings.api_base_url == "http://api.local/api"
    assert settings.timeout_s == 10
