"""
Configuration Management for the Account Service
=================================================

This module handles all application configuration using the Settings pattern
with Pydantic. This approach provides:

1. **Environment Variable Support**: Easy deployment configuration
2. **Validation**: Catches configuration errors at startup
3. **Type Safety**: IDE support and runtime validation
4. **Defaults**: Sensible defaults for development

Design Pattern: Singleton-like Settings
We use a cached function to ensure we only load settings once,
but still allow for easy testing with different configurations.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with ACCOUNTS_ to avoid conflicts.
    Example: ACCOUNTS_MONGODB_URL=mongodb://db:27017

    Priority order (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values defined here
    """

    model_config = SettingsConfigDict(
        env_prefix="ACCOUNTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # =================================================================
    # API Configuration
    # =================================================================
    api_title: str = Field(
        default="Account Service API",
        description="Title shown in the OpenAPI docs"
    )

    api_host: str = Field(
        default="127.0.0.1",
        description="Interface the server binds to"
    )

    api_port: int = Field(
        default=5000,
        description="Port the server listens on"
    )

    api_debug: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, autoreload in the CLI)"
    )

    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser"
    )

    cors_allow_credentials: bool = Field(
        default=True,
        description="Whether CORS responses allow credentials"
    )

    # =================================================================
    # MongoDB Configuration
    # =================================================================
    mongodb_url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string"
    )

    mongodb_database: str = Field(
        default="accounts",
        description="Database holding the users collection"
    )

    users_collection: str = Field(
        default="users",
        description="Collection that stores account documents"
    )

    mongodb_timeout_ms: int = Field(
        default=5000,
        description="""
        Server selection timeout in milliseconds.

        Keeps requests from hanging for the driver default (30s)
        when the database is down.
        """
    )

    # =================================================================
    # Token Configuration
    # =================================================================
    jwt_secret_key: str = Field(
        default="change-me-in-production",
        description="""
        Process-wide secret used to sign tokens.

        MUST be overridden in production (ACCOUNTS_JWT_SECRET_KEY).
        Rotating it invalidates every issued token.
        """
    )

    jwt_algorithm: str = Field(
        default="HS256",
        description="Signing algorithm for tokens"
    )

    jwt_expire_days: int = Field(
        default=5,
        ge=1,
        description="Token lifetime in days"
    )

    # =================================================================
    # Password Hashing
    # =================================================================
    bcrypt_rounds: int = Field(
        default=10,
        ge=4,
        le=31,
        description="""
        bcrypt cost factor (log2 of the iteration count).

        Each increment doubles hashing time. 10 is roughly 50-100ms
        on commodity hardware.
        """
    )

    # =================================================================
    # Rate Limiting
    # =================================================================
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable per-IP rate limiting on register/login"
    )

    auth_rate_limit: str = Field(
        default="20/minute",
        description="slowapi limit string applied to register and login"
    )

    # =================================================================
    # Logging Configuration
    # =================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Python logging format string"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached singleton).

    Using lru_cache ensures we only parse environment variables once.

    For testing, you can clear the cache:
        get_settings.cache_clear()

    Returns:
        Settings: Application settings instance
    """
    return Settings()


def get_settings_for_testing(**overrides) -> Settings:
    """
    Create a Settings instance with custom values for testing.

    Example:
        settings = get_settings_for_testing(
            jwt_secret_key="test-secret",
            bcrypt_rounds=4
        )

    Args:
        **overrides: Setting values to override

    Returns:
        Settings: New Settings instance with overrides applied
    """
    return Settings(**overrides)
