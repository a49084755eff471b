"""
Configuration management for the Form Validation service.

This module handles all configuration settings including the form management
provider connection, validation policy, API server and logging settings using
Pydantic settings.
"""

from typing import Optional, List
from pydantic_settings import BaseSettings
from pydantic import validator, Field
from dotenv import load_dotenv

from ..engine.file_checker import FileCheckPolicy

# Load environment variables from .env file
load_dotenv()


class FormProviderConfig(BaseSettings):
    """Form management provider connection settings."""

    url: str = Field("http://localhost:8080/api/form", description="Base URL of the form management provider")
    timeout: int = Field(30, description="Request timeout in seconds")
    max_retries: int = Field(3, description="Attempts for the schema fetch")
    retry_min_wait: float = 1.0
    retry_max_wait: float = 10.0

    class Config:
        env_prefix = "FORM_PROVIDER_"
        case_sensitive = False
        extra = "ignore"

    @validator("url")
    def validate_url(cls, v: str) -> str:
        """Validate provider URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Form provider URL must start with http:// or https://")
        return v.rstrip("/")

    @validator("max_retries")
    def validate_max_retries(cls, v: int) -> int:
        """Validate retry attempts."""
        if v < 1 or v > 10:
            raise ValueError("Max retries must be between 1 and 10")
        return v


class ValidationPolicyConfig(BaseSettings):
    """Reconciliation and file checking policy."""

    file_check_policy: FileCheckPolicy = FileCheckPolicy.REQUIRED
    exclude_date_errors: bool = False
    deduplicate_errors: bool = True
    trace_id_header: str = "X-B3-TraceId"

    class Config:
        env_prefix = "VALIDATION_"
        case_sensitive = False
        extra = "ignore"


class APIConfig(BaseSettings):
    """API server configuration."""

    host: str = "localhost"
    port: int = 8000
    environment: str = "development"
    debug: bool = True
    cors_origins: List[str] = ["http://localhost:3000"]

    class Config:
        env_prefix = "API_"
        case_sensitive = False
        extra = "ignore"


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_prefix = "LOG_"
        case_sensitive = False
        extra = "ignore"

    @validator("level")
    def validate_level(cls, v: str) -> str:
        """Validate logging level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class AppConfig(BaseSettings):
    """Main application configuration."""

    environment: str = "development"
    debug: bool = True

    # Sub-configurations
    form_provider: FormProviderConfig
    validation: ValidationPolicyConfig
    api: APIConfig
    logging: LoggingConfig

    def __init__(self, **kwargs):
        # Initialize sub-configurations
        kwargs.setdefault("form_provider", FormProviderConfig())
        kwargs.setdefault("validation", ValidationPolicyConfig())
        kwargs.setdefault("api", APIConfig())
        kwargs.setdefault("logging", LoggingConfig())
        super().__init__(**kwargs)

    class Config:
        case_sensitive = False
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra environment variables

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() == "production"


# Global configuration instance
config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance.

    Returns:
        AppConfig: The application configuration instance.
    """
    global config
    if config is None:
        config = AppConfig()
    return config


def reload_config() -> AppConfig:
    """
    Reload the configuration from environment variables.

    Returns:
        AppConfig: The reloaded application configuration instance.
    """
    global config
    config = AppConfig()
    return config
