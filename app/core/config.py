"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, secrets, upload limits)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="pdfdesk",
        description="MongoDB database name"
    )

    # File storage
    UPLOAD_PATH: str = Field(
        default="./uploads",
        description="Directory holding uploaded and generated PDF binaries"
    )
    UPLOAD_URL_PREFIX: str = Field(
        default="/uploads",
        description="Relative URL under which stored files are served"
    )
    MAX_FILE_SIZE: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum size of a single uploaded file in bytes"
    )
    MAX_FILES_PER_UPLOAD: int = Field(
        default=10,
        description="Maximum number of files accepted by one upload request"
    )

    # Merge history
    MERGE_HISTORY_LIMIT: int = Field(
        default=50,
        description="Maximum number of merge operations returned by the history endpoint"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Security
    SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="Secret used to sign bearer tokens"
    )
    TOKEN_EXPIRE_MINUTES: int = Field(
        default=7 * 24 * 60,
        description="Bearer token lifetime in minutes"
    )

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str, info: ValidationInfo) -> str:
        """Ensure secret key is changed in production."""
        if info.data.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("SECRET_KEY must be changed in production environment")
        return v

    @field_validator("UPLOAD_URL_PREFIX")
    @classmethod
    def validate_url_prefix(cls, v: str) -> str:
        """Normalize the prefix to '/name' without a trailing slash."""
        return "/" + v.strip("/")

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

    if not settings.UPLOAD_PATH:
        errors.append("UPLOAD_PATH is required")

    if settings.MAX_FILE_SIZE <= 0:
        errors.append("MAX_FILE_SIZE must be positive")

    if settings.MAX_FILES_PER_UPLOAD <= 0:
        errors.append("MAX_FILES_PER_UPLOAD must be positive")

    if settings.TOKEN_EXPIRE_MINUTES <= 0:
        errors.append("TOKEN_EXPIRE_MINUTES must be positive")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
