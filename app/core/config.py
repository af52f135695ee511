"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (secrets, OTP and session windows, store backend)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Storage
    STORE_BACKEND: Literal["memory", "mongo"] = Field(
        default="memory",
        description="Ledger store backend (volatile in-memory or MongoDB)"
    )
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="fleetledger",
        description="MongoDB database name"
    )

    # Security / sessions
    SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="Secret used to sign session tokens"
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Session token signing algorithm"
    )
    SESSION_TTL_DAYS: int = Field(
        default=7,
        description="Session token validity in days"
    )

    # One-time codes
    OTP_LENGTH: int = Field(
        default=5,
        description="Number of digits in the signup OTP"
    )
    OTP_EXPIRY_MINUTES: int = Field(
        default=5,
        description="Signup OTP validity in minutes"
    )
    EXPOSE_OTP_IN_RESPONSE: bool = Field(
        default=False,
        description="Echo the generated OTP in signup/resend responses (development only)"
    )

    # Dashboard / alerts
    TIMEZONE: str = Field(
        default="Asia/Kolkata",
        description="Canonical timezone for calendar computations"
    )
    ALERT_HORIZON_DAYS: int = Field(
        default=7,
        description="Default forward window for compliance alerts"
    )
    ALERT_CRITICAL_DAYS: int = Field(
        default=3,
        description="Alerts with this many days left or fewer are critical"
    )

    # SMS
    SMS_PROVIDER: Literal["console", "twilio"] = Field(
        default="console",
        description="Outbound SMS channel"
    )
    TWILIO_ACCOUNT_SID: Optional[str] = Field(
        default=None,
        description="Twilio account SID"
    )
    TWILIO_AUTH_TOKEN: Optional[str] = Field(
        default=None,
        description="Twilio auth token"
    )
    TWILIO_FROM_NUMBER: Optional[str] = Field(
        default=None,
        description="Twilio sender number in E.164 format"
    )
    SMS_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Timeout for outbound SMS requests"
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

    @validator("SECRET_KEY")
    def validate_secret_key(cls, v, values):
        """Ensure secret key is changed in production."""
        if values.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("SECRET_KEY must be changed in production environment")
        return v

    @validator("EXPOSE_OTP_IN_RESPONSE")
    def validate_expose_otp(cls, v, values):
        """Never echo OTPs from a production deployment."""
        if values.get("ENVIRONMENT") == "production" and v:
            raise ValueError("EXPOSE_OTP_IN_RESPONSE cannot be enabled in production")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if settings.STORE_BACKEND == "mongo" and not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required when STORE_BACKEND=mongo")

    if settings.OTP_LENGTH < 4:
        errors.append("OTP_LENGTH must be at least 4")

    if settings.OTP_EXPIRY_MINUTES <= 0:
        errors.append("OTP_EXPIRY_MINUTES must be positive")

    if settings.SMS_PROVIDER == "twilio":
        if not settings.TWILIO_ACCOUNT_SID:
            errors.append("TWILIO_ACCOUNT_SID is required when SMS_PROVIDER=twilio")
        if not settings.TWILIO_AUTH_TOKEN:
            errors.append("TWILIO_AUTH_TOKEN is required when SMS_PROVIDER=twilio")
        if not settings.TWILIO_FROM_NUMBER:
            errors.append("TWILIO_FROM_NUMBER is required when SMS_PROVIDER=twilio")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
