from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from pydantic import ValidationError

from reclaim_tracker.materials.models import SessionUser

logger = logging.getLogger(__name__)

AUTH_STATE_KEY = "reclaim_auth"


class SessionContext:
    """Bearer token and signed-in user for one browser session.

    The token lives in ``store``, a mapping owned by a single visitor (the
    Streamlit app passes that tab's ``st.session_state``), so two visitors
    never see each other's login. Call ``hydrate()`` once at startup,
    ``establish()`` after a successful login, and ``clear()`` on logout or
    when the backend answers 401.
    """

    def __init__(self, store: MutableMapping[str, Any] | None = None):
        self.store: MutableMapping[str, Any] = store if store is not None else {}
        self._token: str | None = None
        self._user: SessionUser | None = None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def user(self) -> SessionUser | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def auth_header(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def hydrate(self) -> "SessionContext":
        payload = self.store.get(AUTH_STATE_KEY)
        if not payload:
            return self
        try:
            token = payload.get("token")
            user = SessionUser.model_validate(payload["user"]) if payload.get("user") else None
        except (ValidationError, TypeError, AttributeError):
            logger.warning("Ignoring unreadable saved session")
            self.store.pop(AUTH_STATE_KEY, None)
            return self
        if isinstance(token, str) and token:
            self._token = token
            self._user = user
        return self

    def establish(self, token: str, user: SessionUser | None) -> None:
        self._token = token
        self._user = user
        self.store[AUTH_STATE_KEY] = {
            "token": token,
            "user": user.model_dump(mode="json") if user else None,
        }

    def clear(self) -> None:
        self._token = None
        self._user = None
        self.store.pop(AUTH_STATE_KEY, None)
