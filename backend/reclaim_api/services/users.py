from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from reclaim_api.core.security import hash_password, is_password_too_long, verify_password
from reclaim_api.models.user import User
from reclaim_api.repositories import users as users_repo

logger = logging.getLogger("reclaim_api.services.users")

DEFAULT_ROLES = ("USER",)
ADMIN_ROLES = ("ADMIN", "USER")
MIN_PASSWORD_LENGTH = 6


def _normalize_required_email(email: str) -> str:
    cleaned = email.strip().lower()
    if not cleaned:
        raise ValueError("Email is required.")
    local, _, domain = cleaned.partition("@")
    if not local or "." not in domain:
        raise ValueError("Email must be in a valid format.")
    return cleaned


def create_user(
    db: Session,
    email: str,
    password: str,
    *,
    name: str | None = None,
    roles: tuple[str, ...] = DEFAULT_ROLES,
) -> User:
    cleaned_email = _normalize_required_email(email)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if is_password_too_long(password):
        raise ValueError("Password must be 72 bytes or fewer.")
    if users_repo.get_user_by_email(db, cleaned_email):
        raise ValueError("Email already exists.")
    user = User(
        email=cleaned_email,
        name=(name or "").strip() or None,
        password_hash=hash_password(password),
        roles=",".join(roles),
        is_active=True,
    )
    user = users_repo.create_user(db, user)
    logger.info("Created user %s", user.email)
    return user


def authenticate(db: Session, email: str, password: str) -> User | None:
    user = users_repo.get_user_by_email(db, email.strip())
    if not user or not user.is_active:
        return None
    if is_password_too_long(password) or not verify_password(password, user.password_hash):
        return None
    return user
