"""Application settings.

Values come from environment variables (or a local ``.env`` file). Use
``get_settings()`` everywhere; tests call ``reset_settings()`` after changing
the environment.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: str = "development"
    log_level: str | None = None
    log_dir: str | None = None

    database_url: str = "sqlite:///./storefront.db"
    database_echo: bool = False

    # Users whose email matches this address are created as ADMIN
    super_admin_email: str | None = None

    identity_webhook_secret: str = ""

    auth_jwt_key: str = ""
    auth_jwt_algorithms: list[str] = Field(default_factory=lambda: ["RS256"])
    auth_jwt_issuer: str | None = None

    enforce_catalog_prices: bool = False

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
