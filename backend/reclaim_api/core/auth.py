from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from reclaim_api.core.config import settings
from reclaim_api.core.security import decode_access_token
from reclaim_api.db.session import get_db
from reclaim_api.models.user import User
from reclaim_api.repositories import users as users_repo


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user_optional(request: Request, db: Session) -> User | None:
    token = _bearer_token(request)
    if not token:
        return None
    payload = decode_access_token(token, settings.token_ttl_seconds)
    if not payload:
        return None
    user = users_repo.get_user_by_id(db, int(payload.get("uid", 0)))
    if not user or not user.is_active:
        return None
    return user


def require_auth(request: Request, db: Session = Depends(get_db)) -> User | None:
    """Resolve the signed-in user; with auth disabled, an anonymous request passes as ``None``."""
    user = get_current_user_optional(request, db)
    if user:
        return user
    if not settings.auth_enabled:
        return None
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_user(user: User | None = Depends(require_auth)) -> User:
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
