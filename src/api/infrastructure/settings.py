"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. The registry database URL has no default: the service
refuses to boot without it.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Registry database connection settings.

    Environment variables:
        DATABASE_URL: SQLAlchemy URL of the registry database (required)
        COURSEHUB_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        COURSEHUB_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="COURSEHUB_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    url: SecretStr = Field(
        validation_alias="DATABASE_URL",
        description="Registry database URL (postgresql+asyncpg://...)",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self


class TenantSettings(BaseSettings):
    """Settings for per-course tenant database connections.

    The tenant URL is derived from the stored course endpoint: the endpoint
    host gets ``host_prefix`` prepended (``abcd.supabase.co`` becomes
    ``db.abcd.supabase.co``) and the course's service key is the password.

    Environment variables use the COURSEHUB_TENANT_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="COURSEHUB_TENANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    driver: str = Field(default="postgresql+asyncpg", description="SQLAlchemy driver")
    username: str = Field(default="postgres", description="Tenant database user")
    database: str = Field(default="postgres", description="Tenant database name")
    port: int = Field(default=5432, description="Tenant database port")
    host_prefix: str = Field(
        default="db.",
        description="Prefix prepended to the endpoint host to reach the database",
    )
    connect_timeout_seconds: float = Field(
        default=5.0,
        description="Upper bound on establishing a tenant connection",
        gt=0,
    )
    query_timeout_seconds: float = Field(
        default=30.0,
        description="Upper bound on one unit of work against a tenant database",
        gt=0,
    )
    pool_size: int = Field(
        default=5,
        description="Connections kept per tenant engine",
        ge=1,
        le=50,
    )
    provision_on_create: bool = Field(
        default=False,
        description="Create tenant tables when a course is registered",
    )


class IdentitySettings(BaseSettings):
    """External identity provider settings.

    Environment variables:
        COURSEHUB_IDENTITY_URL: Identity provider base URL
        COURSEHUB_IDENTITY_ANON_KEY: Public API key sent with verification calls
        COURSEHUB_IDENTITY_TIMEOUT_SECONDS: HTTP timeout (default: 5)
    """

    model_config = SettingsConfigDict(
        env_prefix="COURSEHUB_IDENTITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(default="", description="Identity provider base URL")
    anon_key: SecretStr = Field(default=SecretStr(""), description="Public API key")
    timeout_seconds: float = Field(default=5.0, gt=0)


class InsightsSettings(BaseSettings):
    """Cross-course aggregation settings."""

    model_config = SettingsConfigDict(
        env_prefix="COURSEHUB_INSIGHTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    fanout_concurrency: int = Field(
        default=8,
        description="Maximum course databases queried at once",
        ge=1,
        le=64,
    )
    leaderboard_ttl_seconds: float = Field(
        default=30.0,
        description="How long a computed global leaderboard is reused",
        ge=0,
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="COURSEHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="CourseHub API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    default_page_size: int = Field(
        default=50,
        description="Default cap on tenant list queries",
        ge=1,
        le=500,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached registry database settings.

    Raises:
        pydantic.ValidationError: If DATABASE_URL is not set.
    """
    return DatabaseSettings()


@lru_cache
def get_tenant_settings() -> TenantSettings:
    """Get cached tenant connection settings."""
    return TenantSettings()


@lru_cache
def get_identity_settings() -> IdentitySettings:
    """Get cached identity provider settings."""
    return IdentitySettings()


@lru_cache
def get_insights_settings() -> InsightsSettings:
    """Get cached aggregation settings."""
    return InsightsSettings()
