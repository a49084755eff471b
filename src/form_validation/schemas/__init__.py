"""
Pydantic schemas for form definitions, submissions and validation verdicts.
"""

from .form_schemas import (
    DAY_TYPE,
    DATE_TYPE,
    FORM_VALIDATION_ERROR_CODE,
    FORM_VALIDATION_ERROR_MESSAGE,
    FormValue,
    FormDataMap,
    FileType,
    stringify_value,
    ValidateRule,
    Component,
    FormSchema,
    FormData,
    ErrorDetail,
    ErrorList,
    ErrorEnvelope,
    ValidationVerdict,
    RemoteValidationOutcome,
)

__all__ = [
    "DAY_TYPE",
    "DATE_TYPE",
    "FORM_VALIDATION_ERROR_CODE",
    "FORM_VALIDATION_ERROR_MESSAGE",
    "FormValue",
    "FormDataMap",
    "FileType",
    "stringify_value",
    "ValidateRule",
    "Component",
    "FormSchema",
    "FormData",
    "ErrorDetail",
    "ErrorList",
    "ErrorEnvelope",
    "ValidationVerdict",
    "RemoteValidationOutcome",
]
