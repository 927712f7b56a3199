from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    database_url: str | None = None
    auth_enabled: bool = True
    dev_mode: bool = True
    secret_key: str | None = None
    admin_email: str | None = None
    admin_password: str | None = None
    token_ttl_hours: int = 24
    seed_demo_data: bool = False
    cors_origins: str = "http://localhost:8501,http://127.0.0.1:8501"
    log_level: str = "INFO"

    @property
    def required_secret_key(self) -> str:
        if self.auth_enabled and not self.secret_key:
            if self.dev_mode:
                return "reclaim-dev-secret"
            raise RuntimeError("SECRET_KEY must be set when AUTH_ENABLED=true and DEV_MODE=false.")
        return self.secret_key or "reclaim-dev-secret"

    @property
    def token_ttl_seconds(self) -> int:
        return self.token_ttl_hours * 60 * 60

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def sqlalchemy_database_uri(self) -> str:
        if self.database_url:
            return self.database_url
        repo_root = Path(__file__).resolve().parents[3]
        default_path = repo_root / "data" / "reclaim.db"
        return f"sqlite:///{default_path}"


settings = Settings()
