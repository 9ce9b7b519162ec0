"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, token secret, lifetimes)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Loaded once at import and treated as read-only afterwards.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Server
    PORT: int = Field(
        default=8080,
        description="HTTP port the API listens on"
    )

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="storefront",
        description="MongoDB database name"
    )

    # Tokens
    SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="Secret used to sign access and refresh tokens"
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    ACCESS_TOKEN_EXPIRE_HOURS: int = Field(
        default=24,
        description="Access token lifetime in hours"
    )
    REFRESH_TOKEN_EXPIRE_HOURS: int = Field(
        default=168,
        description="Refresh token lifetime in hours"
    )
    TOKEN_HEADER: str = Field(
        default="token",
        description="Request header carrying the access token"
    )

    # Credentials
    BCRYPT_ROUNDS: int = Field(
        default=12,
        description="bcrypt cost factor (4-31)"
    )
    ADMIN_EMAILS: List[str] = Field(
        default_factory=list,
        description="Emails that receive the ADMIN role at signup (JSON list)"
    )

    # Application
    REQUEST_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Upper bound on the time spent handling one request"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    CORS_ORIGINS: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str, info: ValidationInfo) -> str:
        """Ensure secret key is changed in production."""
        if info.data.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("SECRET_KEY must be changed in production environment")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @field_validator("ADMIN_EMAILS")
    @classmethod
    def normalize_admin_emails(cls, v: List[str]) -> List[str]:
        return [email.strip().lower() for email in v if email.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.SECRET_KEY:
        errors.append("SECRET_KEY is required")

    if settings.ACCESS_TOKEN_EXPIRE_HOURS <= 0:
        errors.append("ACCESS_TOKEN_EXPIRE_HOURS must be positive")

    if settings.REFRESH_TOKEN_EXPIRE_HOURS < settings.ACCESS_TOKEN_EXPIRE_HOURS:
        errors.append("REFRESH_TOKEN_EXPIRE_HOURS must not be shorter than the access token lifetime")

    # Production-specific validations
    if settings.is_production and settings.DEBUG:
        errors.append("DEBUG must be disabled in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
