from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from reclaim_api.core.auth import require_user
from reclaim_api.core.security import create_access_token
from reclaim_api.db.session import get_db
from reclaim_api.models.user import User
from reclaim_api.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserRead
from reclaim_api.services import users as users_service

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger("reclaim_api.api")


def _user_read(user: User) -> UserRead:
    return UserRead(id=user.id, email=user.email, name=user.name, roles=user.role_list)


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(token=create_access_token(user.id, user.email), user=_user_read(user))


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    user = users_service.authenticate(db, payload.email, payload.password)
    if not user:
        logger.info("Rejected sign-in for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_response(user)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> TokenResponse:
    try:
        user = users_service.create_user(db, payload.email, payload.password, name=payload.name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _token_response(user)


@router.get("/me", response_model=UserRead)
def me(user: User = Depends(require_user)) -> UserRead:
    return _user_read(user)
