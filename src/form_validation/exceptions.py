"""
Exception hierarchy for the form validation pipeline.

Fatal conditions abort a validation request. ``RemoteValidationRejected`` is the
only recoverable one: it is always caught and reconciled by the service.
"""

from typing import List, Optional

from .schemas.form_schemas import ErrorDetail


class FormValidationError(Exception):
    """Base exception for form validation operations."""
    pass


class CopyFailure(FormValidationError):
    """Raised when submitted data cannot be copied faithfully."""
    pass


class InvalidFormIdError(FormValidationError):
    """Raised when a validation request carries an empty form id."""
    pass


class SchemaUnavailable(FormValidationError):
    """Raised when the form schema cannot be fetched."""

    def __init__(self, message: str, form_id: Optional[str] = None):
        super().__init__(message)
        self.form_id = form_id


class FormNotFoundError(SchemaUnavailable):
    """Raised when the provider does not know the requested form."""
    pass


class RemoteTransportFault(FormValidationError):
    """Raised on network failures, timeouts or unexpected statuses from the provider."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class RemoteValidationRejected(FormValidationError):
    """Raised when the provider rejects submitted data with field errors."""

    def __init__(self, errors: List[ErrorDetail]):
        super().__init__(f"Form data rejected with {len(errors)} error(s)")
        self.errors = list(errors)
