"""
Utility functions and helper modules.

This module contains logging helpers shared across the service.
"""

from .request_logger import (
    ValidationRequestLogger,
    ValidationRequestMetrics,
    track_validation_request,
)

__all__ = [
    "ValidationRequestLogger",
    "ValidationRequestMetrics",
    "track_validation_request",
]
