"""
Services package for request-level business logic.
"""

from .form_validation_service import FormValidationService

__all__ = [
    "FormValidationService",
]
