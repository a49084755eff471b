"""
Configuration management package for the Form Validation service.

This package handles provider connection, validation policy, API and logging
settings.
"""

from .settings import (
    get_config,
    reload_config,
    AppConfig,
    FormProviderConfig,
    ValidationPolicyConfig,
    APIConfig,
    LoggingConfig,
)

__all__ = [
    "get_config",
    "reload_config",
    "AppConfig",
    "FormProviderConfig",
    "ValidationPolicyConfig",
    "APIConfig",
    "LoggingConfig",
]
