"""Unit tests for domain exceptions."""

import pytest

from src.core.exceptions import (
    CircuitBreakerOpenError,
    ConfigurationError,
    DatabaseError,
    FarmInsightsError,
    FarmNotFoundError,
    LLMError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    MalformedPayloadError,
    ModelNotFoundError,
    ProviderError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    StorageError,
    TaskNotFoundError,
    ValidationError,
)


class TestFarmInsightsError:
    """Tests for base FarmInsightsError exception."""

    def test_basic_initialization(self):
        error = FarmInsightsError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "FarmInsightsError"
        assert error.details == {}

    def test_with_custom_code(self):
        error = FarmInsightsError("Error message", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_to_dict(self):
        error = FarmInsightsError("Test error", code="TEST_CODE", details={"extra": "info"})
        assert error.to_dict() == {
            "error": "TEST_CODE",
            "message": "Test error",
            "details": {"extra": "info"},
        }

    def test_configuration_error_defaults_code_to_class_name(self):
        assert ConfigurationError("bad").code == "ConfigurationError"


class TestStorageErrors:
    def test_farm_not_found(self):
        error = FarmNotFoundError(42)
        assert isinstance(error, StorageError)
        assert error.code == "FARM_NOT_FOUND"
        assert error.details["farm_id"] == 42
        assert "42" in error.message

    def test_task_not_found(self):
        error = TaskNotFoundError("17")
        assert error.code == "TASK_NOT_FOUND"
        assert error.details["task_id"] == "17"

    def test_database_error(self):
        error = DatabaseError("get_farm", "disk I/O error")
        assert error.code == "DATABASE_ERROR"
        assert "get_farm" in error.message
        assert error.details["error"] == "disk I/O error"


class TestProviderErrors:
    def test_unavailable_with_reason(self):
        error = ProviderUnavailableError("open_meteo", "HTTP 502")
        assert isinstance(error, ProviderError)
        assert error.code == "PROVIDER_UNAVAILABLE"
        assert error.message.endswith("HTTP 502")

    def test_unavailable_without_reason(self):
        error = ProviderUnavailableError("open_meteo")
        assert error.message == "Signal provider unavailable: open_meteo"

    def test_timeout(self):
        error = ProviderTimeoutError("pest", 5.0)
        assert error.code == "PROVIDER_TIMEOUT"
        assert error.details["timeout"] == 5.0

    def test_malformed_payload_truncates_preview(self):
        error = MalformedPayloadError("weather", "not JSON", "x" * 500)
        assert error.code == "MALFORMED_PAYLOAD"
        assert len(error.details["payload_preview"]) == 200

    def test_malformed_payload_without_payload(self):
        error = MalformedPayloadError("growth", "missing stage")
        assert error.details["payload_preview"] == ""


class TestLLMErrors:
    @pytest.mark.parametrize(
        "error, code",
        [
            (LLMUnavailableError("ollama", "connection refused"), "LLM_UNAVAILABLE"),
            (LLMTimeoutError(30), "LLM_TIMEOUT"),
            (LLMResponseError("empty"), "LLM_RESPONSE_ERROR"),
            (ModelNotFoundError("llama3.1:8b", "ollama"), "MODEL_NOT_FOUND"),
            (CircuitBreakerOpenError("ollama", 42), "CIRCUIT_BREAKER_OPEN"),
        ],
    )
    def test_codes(self, error, code):
        assert isinstance(error, LLMError)
        assert error.code == code

    def test_circuit_breaker_message(self):
        error = CircuitBreakerOpenError("ollama", 42)
        assert error.message == "Circuit breaker open for ollama, retry in 42s"


class TestValidationError:
    def test_value_preview(self):
        error = ValidationError("limit", "must be positive", -1)
        assert error.code == "VALIDATION_ERROR"
        assert error.details["value"] == "-1"

    def test_no_value(self):
        error = ValidationError("farm_id", "required")
        assert error.details["value"] is None

    def test_hierarchy(self):
        assert issubclass(ValidationError, FarmInsightsError)
        assert not issubclass(ValidationError, ProviderError)
