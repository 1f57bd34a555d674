"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, JWT secret, Cloudinary credentials)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Literal


DEFAULT_JWT_SECRET = "change-me-in-production"


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
        default="quickchat",
        description="MongoDB database name"
    )

    # Session tokens
    JWT_SECRET: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="Secret used to sign session tokens"
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Session token signing algorithm"
    )
    ACCESS_TOKEN_EXPIRE_DAYS: int = Field(
        default=7,
        description="Session token lifetime in days"
    )
    BCRYPT_ROUNDS: int = Field(
        default=10,
        description="bcrypt cost factor for password hashing"
    )

    # Cloudinary
    CLOUDINARY_CLOUD_NAME: Optional[str] = Field(
        default=None,
        description="Cloudinary cloud name"
    )
    CLOUDINARY_API_KEY: Optional[str] = Field(
        default=None,
        description="Cloudinary API key"
    )
    CLOUDINARY_API_SECRET: Optional[str] = Field(
        default=None,
        description="Cloudinary API secret used for signed uploads"
    )
    CLOUDINARY_BASE_URL: str = Field(
        default="https://api.cloudinary.com/v1_1",
        description="Cloudinary upload API base URL"
    )
    CLOUDINARY_PROFILE_FOLDER: str = Field(
        default="profile_pics",
        description="Cloudinary folder for profile pictures"
    )
    CLOUDINARY_MESSAGE_FOLDER: Optional[str] = Field(
        default=None,
        description="Cloudinary folder for chat images (root when unset)"
    )
    MEDIA_UPLOAD_TIMEOUT: float = Field(
        default=30.0,
        description="Image upload request timeout in seconds"
    )

    # Upload limits
    MAX_AVATAR_BYTES: int = Field(
        default=2 * 1024 * 1024,
        description="Maximum profile picture size in bytes"
    )
    MAX_MESSAGE_IMAGE_BYTES: int = Field(
        default=5 * 1024 * 1024,
        description="Maximum chat image size in bytes"
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
        default="/api",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: str, info: ValidationInfo) -> str:
        """Ensure the token secret is changed in production."""
        if info.data.get("ENVIRONMENT") == "production" and v == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET must be changed in production environment")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.CLOUDINARY_CLOUD_NAME
            and self.CLOUDINARY_API_KEY
            and self.CLOUDINARY_API_SECRET
        )


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

    if not settings.MONGODB_DB_NAME:
        errors.append("MONGODB_DB_NAME is required")

    if settings.ACCESS_TOKEN_EXPIRE_DAYS <= 0:
        errors.append("ACCESS_TOKEN_EXPIRE_DAYS must be positive")

    # Production-specific validations
    if settings.is_production:
        if settings.JWT_SECRET == DEFAULT_JWT_SECRET:
            errors.append("JWT_SECRET must be changed in production")
        if not settings.cloudinary_configured:
            errors.append("CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET are required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
