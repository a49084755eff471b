"""
Form Schema and Submission Model Definitions.

This module provides the Pydantic models exchanged between the validation engine,
the form management provider and the inbound API.

Features:
- Recursive component tree mirroring the provider's form schema
- Dynamic, untyped submission data with a recursive value alias
- Error detail parsing from the provider's ``context`` block
- Verdict and error envelope models with camelCase wire aliases
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# Configuration Constants
DAY_TYPE = "day"
DATE_TYPE = "date"
FORM_VALIDATION_ERROR_CODE = "FORM_VALIDATION_ERROR"
FORM_VALIDATION_ERROR_MESSAGE = "Form validation error"


# Recursive submission value: scalar | mapping | sequence
FormValue = Union[None, str, int, float, bool, Dict[str, "FormValue"], List["FormValue"]]
FormDataMap = Dict[str, FormValue]


class FileType(str, Enum):
    """Component types whose values are references to uploaded files."""
    FILE = "file"
    FILE_LATEST = "fileLatest"
    FILE_LEGACY = "fileLegacy"

    @classmethod
    def is_file_type(cls, component_type: Optional[str]) -> bool:
        """Check if a component type tag belongs to the file-type family."""
        return component_type in {member.value for member in cls}


def stringify_value(value: Any) -> Optional[str]:
    """
    Render a submitted value as the string carried by ``ErrorDetail.value``.

    Strings are kept as-is, ``None`` stays ``None`` and everything else is
    rendered as compact JSON text.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


# Schema Models
class ValidateRule(BaseModel):
    """Validation block of a component."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    required: bool = Field(False, description="Whether a value must be supplied")
    custom_message: Optional[str] = Field(
        None,
        alias="customMessage",
        description="Message reported when the component fails validation"
    )

    @field_validator("required", mode="before")
    @classmethod
    def coerce_required(cls, v):
        """Treat a missing or null flag as not required."""
        return bool(v) if v is not None else False


class Component(BaseModel):
    """
    Single node of a form schema.

    Components nest through their own ``components`` list, so a schema is a
    tree of arbitrary depth. Unknown provider fields are ignored and missing
    fields fall back to defaults.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    key: Optional[str] = Field(None, description="Field key, unique within its level")
    type: Optional[str] = Field(None, description="Free-form component type tag")
    day_first: Optional[bool] = Field(
        None,
        alias="dayFirst",
        description="Day/month ordering for day components"
    )
    components: List["Component"] = Field(
        default_factory=list,
        description="Nested child components"
    )
    validate_rule: Optional[ValidateRule] = Field(None, alias="validate")

    @field_validator("components", mode="before")
    @classmethod
    def ensure_components_list(cls, v):
        if v is None:
            return []
        return v

    @property
    def children(self) -> List["Component"]:
        """Child components of this node."""
        return self.components

    @property
    def is_day(self) -> bool:
        return self.type == DAY_TYPE

    @property
    def is_file(self) -> bool:
        return FileType.is_file_type(self.type)


Component.model_rebuild()


class FormSchema(BaseModel):
    """Form schema as returned by the form management provider."""

    model_config = ConfigDict(extra="ignore")

    components: List[Component] = Field(default_factory=list)

    @field_validator("components", mode="before")
    @classmethod
    def ensure_components_list(cls, v):
        if v is None:
            return []
        return v


class FormData(BaseModel):
    """Submitted form payload wrapper; ``data`` may be null."""

    data: Optional[Dict[str, Any]] = Field(None, description="Dynamic submission data")


# Error Models
class ErrorDetail(BaseModel):
    """
    Single field-level validation error.

    Accepts both the flat ``{message, field, value}`` shape and the provider's
    ``{message, context: {key, value}}`` shape.
    """

    model_config = ConfigDict(frozen=True)

    message: Optional[str] = None
    field: Optional[str] = None
    value: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def map_context_fields(cls, data):
        """Lift ``context.key`` and ``context.value`` into ``field`` and ``value``."""
        if isinstance(data, dict) and isinstance(data.get("context"), dict):
            context = data["context"]
            return {
                "message": data.get("message"),
                "field": context.get("key"),
                "value": stringify_value(context.get("value")),
            }
        return data

    @field_validator("value", mode="before")
    @classmethod
    def stringify(cls, v):
        return stringify_value(v)


class ErrorList(BaseModel):
    """Error list body of a rejected provider validation call."""

    model_config = ConfigDict(extra="ignore")

    details: List[ErrorDetail] = Field(default_factory=list)

    @field_validator("details", mode="before")
    @classmethod
    def ensure_details_list(cls, v):
        if v is None:
            return []
        return v


class ErrorEnvelope(BaseModel):
    """Error envelope attached to an invalid verdict."""

    model_config = ConfigDict(populate_by_name=True)

    trace_id: Optional[str] = Field(None, alias="traceId")
    code: str = FORM_VALIDATION_ERROR_CODE
    message: str = FORM_VALIDATION_ERROR_MESSAGE
    details: List[ErrorDetail] = Field(default_factory=list)


class ValidationVerdict(BaseModel):
    """Final result of a form validation request."""

    valid: bool
    error: Optional[ErrorEnvelope] = None

    @classmethod
    def ok(cls) -> "ValidationVerdict":
        return cls(valid=True, error=None)

    @classmethod
    def failed(cls, details: List[ErrorDetail], trace_id: Optional[str]) -> "ValidationVerdict":
        return cls(valid=False, error=ErrorEnvelope(trace_id=trace_id, details=list(details)))


class RemoteValidationOutcome(BaseModel):
    """Outcome of the provider's validation call as consumed by the reconciler."""

    accepted: bool
    errors: List[ErrorDetail] = Field(default_factory=list)

    @classmethod
    def success(cls) -> "RemoteValidationOutcome":
        return cls(accepted=True)

    @classmethod
    def rejected(cls, errors: List[ErrorDetail]) -> "RemoteValidationOutcome":
        return cls(accepted=False, errors=list(errors))
