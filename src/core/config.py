"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates" / "notifications"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="EduCenter Notifications API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    ci: bool = Field(default=False, description="Set by CI runners (CI=true)")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/educenter",
        description="PostgreSQL connection URL with asyncpg driver",
    )

    database_pool_size: int = Field(default=5, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)


    # Notifications
    notification_strict_validation: bool | None = Field(
        default=None,
        description="Force strict manifest/variable validation on or off",
    )
    notification_default_locale: str = Field(default="en")
    notification_supported_locales: str = Field(
        default="en,ar",
        description="Comma-separated list of locales templates are expected for",
    )
    notification_templates_dir: str = Field(default=str(_DEFAULT_TEMPLATES_DIR))
    notification_concurrency_limit: int = Field(
        default=20,
        ge=1,
        description="Maximum recipients processed concurrently per dispatch",
    )
    notification_bulk_log_threshold: int = Field(
        default=10,
        description="Batches above this size log start/completion",
    )
    notification_log_deliveries: bool = Field(
        default=True,
        description="Persist a delivery log row per dispatch attempt",
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Hosting providers supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def strict_notification_validation(self) -> bool:
        """Whether manifest and variable findings fail instead of warn.

        An explicit ``NOTIFICATION_STRICT_VALIDATION`` wins; otherwise CI
        runs and production deployments are strict.
        """
        if self.notification_strict_validation is not None:
            return self.notification_strict_validation
        return self.ci or self.is_production

    @computed_field  # type: ignore[prop-decorator]
    @property
    def supported_locales_list(self) -> list[str]:
        """Parse supported locales, always including the default locale first."""
        locales = [
            loc.strip() for loc in self.notification_supported_locales.split(",") if loc.strip()
        ]
        if self.notification_default_locale not in locales:
            locales.insert(0, self.notification_default_locale)
        return locales

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
