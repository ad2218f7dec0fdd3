"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly,
the encryption master key in particular.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        POSTDECK_DB_HOST: Database host (default: localhost)
        POSTDECK_DB_PORT: Database port (default: 5432)
        POSTDECK_DB_DATABASE: Database name (default: postdeck)
        POSTDECK_DB_USERNAME: Database user (default: postdeck)
        POSTDECK_DB_PASSWORD: Database password (required in production)
        POSTDECK_DB_POOL_MAX_CONNECTIONS: Connections held by the pool (default: 10)
        POSTDECK_DB_ECHO: Log emitted SQL statements (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="POSTDECK_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="postdeck", description="Database name")
    username: str = Field(default="postdeck", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    echo: bool = Field(default=False, description="Log emitted SQL statements")

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class EncryptionSettings(BaseSettings):
    """Settings for encrypting secrets at rest.

    Environment variables:
        POSTDECK_ENCRYPTION_MASTER_KEY: Master key all stored API keys are
            sealed under (required)
    """

    model_config = SettingsConfigDict(
        env_prefix="POSTDECK_ENCRYPTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    master_key: SecretStr = Field(
        default=SecretStr(""),
        description="Master key for API key encryption",
    )

    @model_validator(mode="after")
    def validate_master_key(self) -> "EncryptionSettings":
        """Reject a missing master key.

        Starting without one would make every stored key unreadable.
        """
        if not self.master_key.get_secret_value():
            raise ValueError(
                "POSTDECK_ENCRYPTION_MASTER_KEY must be set to a non-empty value"
            )
        return self


class AdminSettings(BaseSettings):
    """Settings for operators of the key management routes.

    Environment variables:
        POSTDECK_ADMIN_TOKEN: Bearer token required by every /api-keys
            route (required)
    """

    model_config = SettingsConfigDict(
        env_prefix="POSTDECK_ADMIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    token: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer token for key management",
    )

    @model_validator(mode="after")
    def validate_token(self) -> "AdminSettings":
        """Reject a missing admin token."""
        if not self.token.get_secret_value():
            raise ValueError("POSTDECK_ADMIN_TOKEN must be set to a non-empty value")
        return self


class APIKeySettings(BaseSettings):
    """Policy settings for the API key service.

    Environment variables:
        POSTDECK_API_KEYS_MIN_KEY_NAME_LENGTH: Shortest accepted key name (default: 3)
        POSTDECK_API_KEYS_MAX_KEY_NAME_LENGTH: Longest accepted key name (default: 50)
        POSTDECK_API_KEYS_MAX_KEYS_PER_PLATFORM: Cap on stored keys per platform
            (default: unlimited)
        POSTDECK_API_KEYS_DEFAULT_EXPIRATION_DAYS: Expiration applied when none
            is given (default: never)
        POSTDECK_API_KEYS_ALLOW_MULTIPLE_ACTIVE_KEYS: Whether a platform may
            hold several active keys (default: true)
        POSTDECK_API_KEYS_EXPIRING_SOON_DAYS: Window used by the metrics
            endpoint to flag keys about to expire (default: 7)
    """

    model_config = SettingsConfigDict(
        env_prefix="POSTDECK_API_KEYS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    min_key_name_length: int = Field(default=3, ge=1)
    max_key_name_length: int = Field(default=50, ge=1)
    max_keys_per_platform: int | None = Field(default=None, ge=1)
    default_expiration_days: int | None = Field(default=None, ge=1)
    allow_multiple_active_keys: bool = Field(default=True)
    expiring_soon_days: int = Field(default=7, ge=1)

    @model_validator(mode="after")
    def validate_name_lengths(self) -> "APIKeySettings":
        """Validate max name length >= min name length."""
        if self.max_key_name_length < self.min_key_name_length:
            raise ValueError(
                f"max_key_name_length ({self.max_key_name_length}) must be >= "
                f"min_key_name_length ({self.min_key_name_length})"
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Postdeck API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def encryption(self) -> EncryptionSettings:
        """Get encryption settings."""
        return get_encryption_settings()

    @property
    def admin(self) -> AdminSettings:
        """Get key management access settings."""
        return get_admin_settings()

    @property
    def api_keys(self) -> APIKeySettings:
        """Get API key policy settings."""
        return get_api_key_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_encryption_settings() -> EncryptionSettings:
    """Get cached encryption settings."""
    return EncryptionSettings()


@lru_cache
def get_api_key_settings() -> APIKeySettings:
    """Get cached API key policy settings."""
    return APIKeySettings()


@lru_cache
def get_admin_settings() -> AdminSettings:
    """Get cached key management access settings."""
    return AdminSettings()
