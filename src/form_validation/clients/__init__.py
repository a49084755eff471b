"""
Clients for external services used by the validation pipeline.
"""

from .form_provider_client import FormProviderClient, DEFAULT_TRACE_ID_HEADER

__all__ = [
    "FormProviderClient",
    "DEFAULT_TRACE_ID_HEADER",
]
