"""
Tests for the Form Validation API endpoints.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from form_validation.api import app, get_validation_service
from form_validation.exceptions import (
    CopyFailure,
    FormNotFoundError,
    InvalidFormIdError,
    RemoteTransportFault,
    SchemaUnavailable,
)
from form_validation.schemas.form_schemas import ErrorDetail, ValidationVerdict
from form_validation.services.form_validation_service import FormValidationService


@pytest.fixture
def service():
    mock_service = MagicMock(spec=FormValidationService)
    mock_service.validate_form = AsyncMock(return_value=ValidationVerdict.ok())
    return mock_service


@pytest.fixture
def api_client(service):
    app.dependency_overrides[get_validation_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestValidateEndpoint:
    """Test POST /forms/{form_id}/validate."""

    def test_valid_submission(self, api_client, service):
        response = api_client.post("/forms/form-1/validate", json={"data": {"dob": "2020-01-02"}})

        assert response.status_code == 200
        assert response.json() == {"valid": True, "error": None}
        args = service.validate_form.await_args
        assert args.args[0] == "form-1"
        assert args.args[1].data == {"dob": "2020-01-02"}

    def test_invalid_submission_wire_shape(self, api_client, service):
        service.validate_form.return_value = ValidationVerdict.failed(
            [ErrorDetail(message="Attach the document", field="fileName", value="[]")],
            "trace-9"
        )

        response = api_client.post("/forms/form-1/validate", json={"data": {}})

        assert response.status_code == 200
        assert response.json() == {
            "valid": False,
            "error": {
                "traceId": "trace-9",
                "code": "FORM_VALIDATION_ERROR",
                "message": "Form validation error",
                "details": [{"message": "Attach the document", "field": "fileName", "value": "[]"}],
            },
        }

    def test_trace_id_header_forwarded(self, api_client, service):
        api_client.post("/forms/form-1/validate", json={"data": None}, headers={"X-B3-TraceId": "abc123"})

        assert service.validate_form.await_args.kwargs["trace_id"] == "abc123"

    def test_trace_id_generated(self, api_client, service):
        api_client.post("/forms/form-1/validate", json={})

        assert service.validate_form.await_args.kwargs["trace_id"]

    @pytest.mark.parametrize("error, status_code, error_code", [
        (FormNotFoundError("Form 'x' not found", form_id="x"), 404, "FORM_NOT_FOUND"),
        (SchemaUnavailable("provider down", form_id="x"), 502, "SCHEMA_UNAVAILABLE"),
        (RemoteTransportFault("timeout", status=504), 502, "FORM_PROVIDER_ERROR"),
        (CopyFailure("Error while copying form data"), 500, "INTERNAL_ERROR"),
        (InvalidFormIdError("form_id must not be empty"), 400, "BAD_REQUEST"),
    ])
    def test_fatal_errors_mapped(self, api_client, service, error, status_code, error_code):
        service.validate_form.side_effect = error

        response = api_client.post("/forms/x/validate", json={"data": {}})

        assert response.status_code == status_code
        assert response.json()["error_code"] == error_code

    @pytest.mark.parametrize("error", [
        ValueError("internal bug detail"),
        RuntimeError("internal bug detail"),
    ])
    def test_unexpected_errors_are_internal(self, service, error):
        service.validate_form.side_effect = error
        app.dependency_overrides[get_validation_service] = lambda: service
        try:
            response = TestClient(app, raise_server_exceptions=False).post("/forms/x/validate", json={"data": {}})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["error_code"] == "INTERNAL_ERROR"
        assert "internal bug detail" not in response.text


class TestHealthEndpoint:
    def test_health(self, api_client):
        response = api_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
