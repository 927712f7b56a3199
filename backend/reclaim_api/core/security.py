from __future__ import annotations

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from reclaim_api.core.config import settings

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
_MAX_BCRYPT_PASSWORD_BYTES = 72
_TOKEN_SALT = "reclaim-token"


def is_password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > _MAX_BCRYPT_PASSWORD_BYTES


def hash_password(password: str) -> str:
    if is_password_too_long(password):
        raise ValueError("Password must be 72 bytes or fewer.")
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return _pwd_context.verify(password, password_hash)


def _get_serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.required_secret_key, salt=_TOKEN_SALT)


def create_access_token(user_id: int, email: str) -> str:
    payload = {"uid": user_id, "email": email}
    return _get_serializer().dumps(payload)


def decode_access_token(token: str, max_age_seconds: int) -> dict[str, str | int] | None:
    serializer = _get_serializer()
    try:
        payload = serializer.loads(token, max_age=max_age_seconds)
    except (BadSignature, SignatureExpired):
        return None
    return payload if isinstance(payload, dict) else None
