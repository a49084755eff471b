"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from form_validation.config.settings import (
    AppConfig,
    FormProviderConfig,
    LoggingConfig,
    ValidationPolicyConfig,
    get_config,
    reload_config,
)
from form_validation.engine.file_checker import FileCheckPolicy


class TestFormProviderConfig:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("FORM_PROVIDER_URL", "https://forms.example.com/api/form/")
        monkeypatch.setenv("FORM_PROVIDER_TIMEOUT", "5")

        provider_config = FormProviderConfig()

        assert provider_config.url == "https://forms.example.com/api/form"
        assert provider_config.timeout == 5

    def test_invalid_url(self):
        with pytest.raises(ValidationError):
            FormProviderConfig(url="ftp://forms")

    def test_invalid_retries(self):
        with pytest.raises(ValidationError):
            FormProviderConfig(max_retries=0)


class TestValidationPolicyConfig:
    def test_defaults(self):
        policy = ValidationPolicyConfig()

        assert policy.file_check_policy == FileCheckPolicy.REQUIRED
        assert policy.exclude_date_errors is False
        assert policy.deduplicate_errors is True
        assert policy.trace_id_header == "X-B3-TraceId"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("VALIDATION_FILE_CHECK_POLICY", "any_invalid")
        monkeypatch.setenv("VALIDATION_EXCLUDE_DATE_ERRORS", "true")

        policy = ValidationPolicyConfig()

        assert policy.file_check_policy == FileCheckPolicy.ANY_INVALID
        assert policy.exclude_date_errors is True


class TestAppConfig:
    def test_sub_configurations(self):
        app_config = AppConfig()

        assert isinstance(app_config.form_provider, FormProviderConfig)
        assert isinstance(app_config.validation, ValidationPolicyConfig)
        assert app_config.is_development

    def test_log_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"
        with pytest.raises(ValidationError):
            LoggingConfig(level="loud")

    def test_reload_config(self, monkeypatch):
        first = get_config()
        monkeypatch.setenv("FORM_PROVIDER_TIMEOUT", "7")

        reloaded = reload_config()

        assert reloaded is not first
        assert reloaded.form_provider.timeout == 7
        assert get_config() is reloaded
        reload_config()
