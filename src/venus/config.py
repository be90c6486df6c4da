"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with VENUS_ prefix
(and an optional .env file). Settings are read once at import time and
never mutated afterwards, so request handlers can read them from any task.

Learn: the model validator is the startup gate. Outside the development
environment a weak or missing JWT secret, or the localhost auth bypass,
makes Settings() raise and the process never starts serving.
"""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_JWT_SECRET = "venus-dev-secret-change-me-in-production"
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """All app configuration. Set via VENUS_* env vars."""

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8085

    # Database
    database_url: str = "sqlite+aiosqlite:///./venus.db"
    auto_create_schema: bool = True

    # Auth
    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = "HS256"
    token_expire_days: int = Field(default=7, ge=1)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    password_hash_workers: int = Field(default=4, ge=1)
    token_cookie_name: str = "token"
    cookie_secure: bool = False

    # Dev-only: treat Host: localhost[:port] as user `dev_bypass_user_id`
    insecure_dev_bypass: bool = False
    dev_bypass_user_id: int = 1

    # Uploads
    upload_dir: str = "uploads/images"
    max_upload_bytes: int = 10 * 1024 * 1024

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:8085",
    ]

    model_config = SettingsConfigDict(env_prefix="VENUS_", env_file=".env", extra="ignore")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Refuse insecure defaults in non-development environments."""
        if self.is_development:
            return self
        if not self.jwt_secret or self.jwt_secret == DEV_JWT_SECRET:
            raise ValueError(
                "VENUS_JWT_SECRET must be set to a secure value in "
                "non-development environments. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(48))"'
            )
        if len(self.jwt_secret) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"VENUS_JWT_SECRET must be at least {MIN_SECRET_LENGTH} characters"
            )
        if self.insecure_dev_bypass:
            raise ValueError(
                "VENUS_INSECURE_DEV_BYPASS is only allowed when VENUS_ENVIRONMENT=development"
            )
        return self


# Singleton — import this everywhere
settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings
