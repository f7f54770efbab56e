"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="AngiDay", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="sqlite:///./angiday.db",
        description="SQLAlchemy database URL (postgresql+psycopg2://... in production)",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Access policies
    install_native_policies: bool = Field(
        default=False,
        description="Install row level security policies on PostgreSQL and bind each transaction to its caller",
    )
    policy_db_role: str = Field(
        default="authenticated",
        description="Database role that caller transactions switch to and policies apply to",
    )
    policy_identity_setting: str = Field(
        default="app.user_id",
        description="Transaction-local setting that carries the caller id",
    )
    policy_identity_sql: str = Field(
        default="nullif(current_setting('app.user_id', true), '')::uuid",
        description="SQL expression yielding the caller identity inside native row level security policies",
    )
    seed_tag_catalog: bool = Field(
        default=True, description="Seed the shared tag catalog at start-up"
    )

    # Identity provider sessions
    session_ttl_minutes: int = Field(
        default=60 * 24, ge=1, description="Lifetime of an identity session"
    )
    allow_passwordless_sign_in: bool = Field(
        default=False,
        description="Issue sessions from an email address alone outside development and testing",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(default="AngiDay API", description="API documentation title")
    api_description: str = Field(
        default="Recipe and meal planning backend with row level access policies",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if v.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v.upper()

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING

    def passwordless_sign_in_enabled(self) -> bool:
        """Email-only sign-in is off in staging and production unless explicitly allowed"""
        return self.allow_passwordless_sign_in or self.is_development() or self.is_testing()


# Global settings instance
settings = Settings()
