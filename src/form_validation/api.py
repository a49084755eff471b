"""
FastAPI Application for the Form Validation service.

This module provides the REST endpoint that validates form submissions.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from form_validation import __version__
from form_validation.clients.form_provider_client import FormProviderClient
from form_validation.config.settings import get_config
from form_validation.exceptions import (
    CopyFailure,
    FormNotFoundError,
    InvalidFormIdError,
    RemoteTransportFault,
    SchemaUnavailable,
)
from form_validation.schemas.form_schemas import FormData, ValidationVerdict
from form_validation.services.form_validation_service import FormValidationService

# Configure logging
config = get_config()
logging.basicConfig(level=config.logging.level, format=config.logging.format)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("Starting Form Validation API server...")
    client = FormProviderClient.from_config(
        config.form_provider,
        trace_id_header=config.validation.trace_id_header
    )
    app.state.validation_service = FormValidationService(client, config.validation)
    logger.info(f"Form provider client initialized: {config.form_provider.url}")

    yield

    logger.info("Shutting down Form Validation API server...")
    await client.close()


# Create FastAPI application
app = FastAPI(
    title="Form Validation API",
    description="Schema-driven validation of dynamic form submissions",
    version=__version__,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# Pydantic Models for API
class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    error_code: str = Field(..., description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: str = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")


def get_validation_service(request: Request) -> FormValidationService:
    """Resolve the request-independent validation service."""
    return request.app.state.validation_service


def get_trace_id(request: Request) -> str:
    """Read the trace id from the configured header or generate one."""
    return request.headers.get(config.validation.trace_id_header) or uuid4().hex


# Middleware for request logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests."""
    start_time = time.time()
    logger.info(f"Request: {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(f"Response: {response.status_code} - {process_time:.3f}s")
    return response


# API Endpoints
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__
    )


@app.post("/forms/{form_id}/validate", response_model=ValidationVerdict)
async def validate_form_endpoint(
    form_id: str,
    form_data: FormData,
    trace_id: str = Depends(get_trace_id),
    service: FormValidationService = Depends(get_validation_service)
):
    """
    Validate a form submission against its form schema.

    Invalid submissions are a normal outcome and are returned with status 200
    and ``valid: false``.
    """
    return await service.validate_form(form_id, form_data, trace_id=trace_id)


def _error_response(status_code: int, error: str, error_code: str, details: Optional[Dict[str, Any]] = None):
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, error_code=error_code, details=details).model_dump()
    )


# Error handlers
@app.exception_handler(FormNotFoundError)
async def form_not_found_handler(request: Request, exc: FormNotFoundError):
    """Unknown form ids map to 404."""
    logger.warning(f"Form not found: {exc.form_id}")
    return _error_response(status.HTTP_404_NOT_FOUND, str(exc), "FORM_NOT_FOUND", {"form_id": exc.form_id})


@app.exception_handler(SchemaUnavailable)
async def schema_unavailable_handler(request: Request, exc: SchemaUnavailable):
    logger.error(f"Schema unavailable: {exc}")
    return _error_response(status.HTTP_502_BAD_GATEWAY, str(exc), "SCHEMA_UNAVAILABLE", {"form_id": exc.form_id})


@app.exception_handler(RemoteTransportFault)
async def remote_transport_fault_handler(request: Request, exc: RemoteTransportFault):
    logger.error(f"Form provider failure: {exc}")
    return _error_response(
        status.HTTP_502_BAD_GATEWAY, "Form provider unavailable", "FORM_PROVIDER_ERROR", {"status": exc.status}
    )


@app.exception_handler(CopyFailure)
async def copy_failure_handler(request: Request, exc: CopyFailure):
    logger.error(f"Copy failure: {exc}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR")


@app.exception_handler(InvalidFormIdError)
async def invalid_form_id_handler(request: Request, exc: InvalidFormIdError):
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), "BAD_REQUEST")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Unexpected failures map to 500 without exposing their details."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "form_validation.api:app",
        host=config.api.host,
        port=config.api.port,
        reload=config.api.debug,
        log_level="info"
    )
