from __future__ import annotations

import os
from dataclasses import dataclass


def get_env(key: str, default: str) -> str:
    value = os.getenv(key)
    if value is None:
        return default
    return value


def get_int_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class ClientSettings:
    api_base_url: str = "http://127.0.0.1:8000/api"
    timeout_s: int = 10

    @classmethod
    def from_env(cls) -> "ClientSettings":
        return cls(
            api_base_url=get_env("API_BASE_URL", cls.api_base_url).rstrip("/"),
            timeout_s=get_int_env("API_TIMEOUT_S", cls.timeout_s),
        )
