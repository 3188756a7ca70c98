"""
jobbot/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (bot token, storage paths, DB URI, etc.)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """
    
    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    
    # Telegram Bot API
    BOT_TOKEN: Optional[str] = Field(
        default=None,
        description="Telegram bot authentication token"
    )
    BOT_NAME: str = Field(
        default="JobBot",
        description="Bot display name used in the welcome message"
    )
    BOT_USERNAME: Optional[str] = Field(
        default=None,
        description="Bot @username; when set, /command@OtherBot is treated as plain text"
    )
    TELEGRAM_API_URL: str = Field(
        default="https://api.telegram.org",
        description="Telegram Bot API base URL"
    )
    TELEGRAM_TIMEOUT: float = Field(
        default=10.0,
        description="Bot API request timeout in seconds"
    )
    
    # Update delivery
    RUN_MODE: Literal["webhook", "polling"] = Field(
        default="polling",
        description="How updates are received from Telegram"
    )
    WEBHOOK_URL: Optional[str] = Field(
        default=None,
        description="Public URL Telegram posts updates to (webhook mode)"
    )
    WEBHOOK_SECRET: Optional[str] = Field(
        default=None,
        description="Secret echoed by Telegram in X-Telegram-Bot-Api-Secret-Token"
    )
    POLLING_TIMEOUT: int = Field(
        default=30,
        description="Long-polling timeout for getUpdates in seconds"
    )
    
    # Storage
    STORAGE_BACKEND: Literal["json", "mongo", "memory"] = Field(
        default="json",
        description="Record store backend"
    )
    USER_DATA_FILE: str = Field(
        default="user_data.json",
        description="JSON document holding all user records"
    )
    JOBS_FILE: str = Field(
        default="jobs.json",
        description="JSON document holding the job list"
    )
    STORE_TIMEOUT: float = Field(
        default=5.0,
        description="Upper bound for a single store read/write in seconds"
    )
    
    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="jobbot",
        description="MongoDB database name"
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
    
    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lower-case level names from the environment."""
        return v.upper()
    
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


def validate_settings(config: Optional[Settings] = None):
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    config = config or settings
    errors = []
    
    if not config.BOT_TOKEN:
        errors.append("BOT_TOKEN is required")
    
    if config.RUN_MODE == "webhook":
        if not config.WEBHOOK_URL:
            errors.append("WEBHOOK_URL is required in webhook mode")
        if config.is_production and not config.WEBHOOK_SECRET:
            errors.append("WEBHOOK_SECRET is required for webhooks in production")
    
    if config.STORAGE_BACKEND == "mongo" and not config.MONGODB_URL:
        errors.append("MONGODB_URL is required for the mongo backend")
    
    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")
    
    return True
