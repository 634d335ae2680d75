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


class StoreBackend(str, Enum):
    """Document store implementations"""

    MEMORY = "memory"
    MONGO = "mongo"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="UniMeal", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Document store settings
    store_backend: StoreBackend = Field(
        default=StoreBackend.MEMORY, description="Document store implementation"
    )
    mongo_uri: str = Field(
        default="mongodb://localhost:27017", description="MongoDB connection URI"
    )
    mongo_db_name: str = Field(default="unimeal", description="MongoDB database name")
    mongo_collection: str = Field(
        default="documents", description="MongoDB collection holding user documents"
    )

    # Client-side preferences (view mode, theme)
    preferences_path: str = Field(
        default="", description="JSON file for UI preferences; empty keeps them in memory"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
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
    api_title: str = Field(default="UniMeal API", description="API documentation title")
    api_description: str = Field(
        default="Student meal planning: ingredients, weekly meals and a monthly food budget",
        description="API documentation description",
    )

    # Domain rules
    currency_code: str = Field(default="EUR", description="Fixed display currency")
    currency_symbol: str = Field(default="€", description="Symbol used when formatting money")
    expiring_soon_days: int = Field(
        default=3, ge=0, description="Days ahead (inclusive) an item counts as expiring soon"
    )
    low_budget_ratio: float = Field(
        default=0.2, ge=0, le=1, description="Remaining share of the limit that triggers a warning"
    )
    max_suggestions: int = Field(
        default=5, ge=1, description="Maximum number of use-it-up dish suggestions"
    )
    fallback_weekday: str = Field(
        default="monday", description="Weekday used for templates without a default"
    )
    copied_flag_seconds: float = Field(
        default=2.0, ge=0, description="How long the export 'copied' confirmation stays up"
    )
    upcoming_meals_limit: int = Field(
        default=5, ge=1, description="Meals shown in the dashboard preview"
    )
    dashboard_expiring_preview: int = Field(
        default=4, ge=1, description="Expiring ingredients shown on the dashboard"
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

    @field_validator("fallback_weekday", mode="before")
    @classmethod
    def validate_fallback_weekday(cls, v):
        """Normalize the fallback weekday to its lower-case enum value"""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()
