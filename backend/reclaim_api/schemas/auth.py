from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class RegisterRequest(LoginRequest):
    name: str | None = None


class UserRead(BaseModel):
    id: int
    email: str
    name: str | None = None
    roles: list[str] = Field(default_factory=list)


class TokenResponse(BaseModel):
    token: str
    user: UserRead
