"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables and/or a .env file.
Sensitive data (passwords, API keys) should only come from environment.
"""

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Relational database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 5432
    user: str = "flugzeug"
    password: SecretStr = SecretStr("p")
    database: str = "flugzeug"
    pool_size: int = 5
    pool_max_overflow: int = 10
    echo: bool = False

    # Full SQLAlchemy URL, e.g. "sqlite+aiosqlite:///flugzeug.db".
    # Overrides the PostgreSQL parts above when set.
    url: Optional[str] = None

    @property
    def async_url(self) -> str:
        """Get async database URL for SQLAlchemy."""
        if self.url:
            return self.url
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"

    @property
    def dialect(self) -> str:
        """Dialect name without driver, e.g. ``postgresql`` or ``sqlite``."""
        return self.async_url.split(":", 1)[0].split("+", 1)[0]


class MailSettings(BaseSettings):
    """SMTP notification configuration."""

    model_config = SettingsConfigDict(env_prefix="MAIL_")

    enabled: bool = False
    host: str = "localhost"
    port: int = 25
    username: Optional[str] = None
    password: Optional[SecretStr] = None
    use_tls: bool = False
    sender: str = "flugzeug@acme.com"
    recipients_raw: str = Field(
        default="admin@acme.com",
        validation_alias="MAIL_RECIPIENTS",
        description="Comma-separated list of notification recipients",
    )
    timeout: float = 10.0

    @property
    def recipients(self) -> list[str]:
        """Get recipients as list."""
        return [r.strip() for r in self.recipients_raw.split(",") if r.strip()]


class SecuritySettings(BaseSettings):
    """Security configuration."""

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    api_key: Optional[SecretStr] = Field(
        default=None,
        description="API key required for write operations",
    )
    cors_allowed_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. "
                    "Use '*' only in development."
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Flugzeug API"
    environment: str = "development"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    mail: MailSettings = Field(default_factory=MailSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)


# Cached settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings.

    Uses caching to avoid re-reading environment on every call.

    Returns:
        Settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def clear_settings_cache() -> None:
    """Clear settings cache (useful for testing)."""
    global _settings
    _settings = None
