"""Application configuration from environment."""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Settings shared by the API and offline tools (admin bootstrap)."""

    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database (async driver: sqlite+aiosqlite or postgresql+asyncpg)
    database_url: str = Field(default="sqlite+aiosqlite:///./tlearn.db", alias="DB_URL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )


class Settings(StoreSettings):
    """App settings loaded from env / .env. Built once at startup, read-only afterwards."""

    app_name: str = "t-learn"

    # Session tokens. No default secret: a missing JWT_SECRET must stop startup.
    secret_key: str = Field(alias="JWT_SECRET", repr=False)
    token_ttl_hours: int = Field(default=24, alias="TOKEN_TTL_HOURS", gt=0)

    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8080, alias="API_PORT")

    @field_validator("secret_key")
    @classmethod
    def _secret_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("JWT_SECRET must be set to a non-empty value")
        return value


class BootstrapSettings(StoreSettings):
    """scripts/create_admin.py: needs the database, never the signing secret."""

    admin_username: str = Field(default="admin", alias="ADMIN_USERNAME")
    admin_email: str = Field(default="admin@t-learn.com", alias="ADMIN_EMAIL")
    admin_password: str | None = Field(default=None, alias="ADMIN_PASSWORD", repr=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
