# python
# app/core/config.py
"""Configuration settings for the photo delivery service.

Uses Pydantic BaseSettings for environment variable management.
"""
from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Photo Delivery API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Authentication (Firebase) =====
    firebase_project_id: str | None = Field(default=None, description="Firebase project ID")
    firebase_jwks_url: str = Field(
        default="https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com",
        description="JWKS endpoint used to verify Firebase ID tokens",
    )
    auth_verify_signature: bool = Field(
        default=True, description="Verify ID token signatures (disable only for local development)"
    )

    # ===== Database Settings =====
    database_url: str | None = Field(default=None, description="Database connection URL")
    db_pool_size: int = Field(default=20, description="Database connection pool size")
    db_max_overflow: int = Field(default=0, description="Database max overflow connections")

    # Test database URL
    test_database_url: str | None = Field(default=None, description="Test database URL")

    # ===== Delivery Settings =====
    public_base_url: str = Field(
        default="http://localhost:5173", description="Base URL of the public delivery page"
    )
    delivery_token_bytes: int = Field(
        default=24, description="Random bytes in a delivery token (base64url encoded)"
    )
    default_max_revision_rounds: int = Field(
        default=2, description="Revision rounds for orders when the partner has no setting"
    )
    min_revision_comment_length: int = Field(
        default=10, description="Minimum characters of revision feedback"
    )
    max_review_length: int = Field(default=2000, description="Maximum characters of a review")
    max_comment_length: int = Field(default=5000, description="Maximum characters of a comment")
    hidden_file_prefix: str = Field(
        default=".", description="File names starting with this prefix are never delivered"
    )

    # ===== Background Tasks (Celery) =====
    celery_broker_url: str = Field(
        default="redis://localhost:6379/1", description="Celery broker URL"
    )
    celery_result_backend: str = Field(
        default="redis://localhost:6379/2", description="Celery result backend"
    )

    # ===== Email Configuration =====
    smtp_host: str | None = Field(default=None, description="SMTP host")
    smtp_port: int = Field(default=587, description="SMTP port")
    smtp_user: str | None = Field(default=None, description="SMTP username")
    smtp_password: str | None = Field(default=None, description="SMTP password")
    email_from: str | None = Field(default=None, description="Email from address")

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.json, description="Log format")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def has_email(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    def delivery_url(self, token: str) -> str:
        return f"{self.public_base_url.rstrip('/')}/delivery/{token}"

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            if lv in ["test"]:
                return "testing"
        return v

    @field_validator("default_max_revision_rounds")
    @classmethod
    def validate_max_rounds(cls, v):
        if v < 0 or v > 50:
            raise ValueError("Default revision rounds must be between 0 and 50")
        return v

    @field_validator("min_revision_comment_length")
    @classmethod
    def validate_min_comment_length(cls, v):
        if v < 1:
            raise ValueError("Minimum revision comment length must be at least 1")
        return v

    @field_validator("delivery_token_bytes")
    @classmethod
    def validate_token_bytes(cls, v):
        if v < 16:
            raise ValueError("Delivery tokens need at least 16 random bytes")
        return v

    @model_validator(mode="after")
    def set_computed_fields(self):
        if self.is_production and not self.auth_verify_signature:
            raise ValueError("Token signature verification cannot be disabled in production")
        return self


settings = Settings()


class ConfigValidator:
    @staticmethod
    def validate_required_settings():
        errors = []
        if not settings.database_url:
            errors.append("DATABASE_URL is required")
        if not settings.firebase_project_id:
            errors.append("FIREBASE_PROJECT_ID is required")
        if settings.is_production and not settings.has_email:
            errors.append("SMTP settings are required in production")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @staticmethod
    def get_feature_status() -> dict:
        return {
            "email_enabled": settings.has_email,
            "signature_verification": settings.auth_verify_signature,
            "environment": settings.environment,
        }


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "features": ConfigValidator.get_feature_status(),
        "database_configured": bool(settings.database_url),
        "auth_configured": bool(settings.firebase_project_id),
    }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
]
