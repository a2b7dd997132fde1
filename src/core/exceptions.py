"""
Domain exceptions for the farm insights engine.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class FarmInsightsError(Exception):
    """Base exception for all farm insights errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(FarmInsightsError):
    """Base exception for storage operations."""

    pass


class FarmNotFoundError(StorageError):
    """Farm not found in storage."""

    def __init__(self, farm_id: int):
        super().__init__(
            f"Farm not found: {farm_id}",
            code="FARM_NOT_FOUND",
            details={"farm_id": farm_id},
        )


class TaskNotFoundError(StorageError):
    """Task recommendation not found in storage."""

    def __init__(self, task_id: str):
        super().__init__(
            f"Task recommendation not found: {task_id}",
            code="TASK_NOT_FOUND",
            details={"task_id": task_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Signal Provider Exceptions
class ProviderError(FarmInsightsError):
    """Base exception for signal provider failures."""

    pass


class ProviderUnavailableError(ProviderError):
    """Signal provider could not be reached."""

    def __init__(self, provider: str, reason: str | None = None):
        super().__init__(
            f"Signal provider unavailable: {provider}" + (f" - {reason}" if reason else ""),
            code="PROVIDER_UNAVAILABLE",
            details={"provider": provider, "reason": reason},
        )


class ProviderTimeoutError(ProviderError):
    """Signal provider call exceeded its time budget."""

    def __init__(self, provider: str, timeout: float):
        super().__init__(
            f"Signal provider {provider} timed out after {timeout} seconds",
            code="PROVIDER_TIMEOUT",
            details={"provider": provider, "timeout": timeout},
        )


class MalformedPayloadError(ProviderError):
    """Provider returned a payload that does not match the expected shape."""

    def __init__(self, provider: str, reason: str, payload: str | None = None):
        super().__init__(
            f"Malformed payload from {provider}: {reason}",
            code="MALFORMED_PAYLOAD",
            details={
                "provider": provider,
                "reason": reason,
                "payload_preview": (payload or "")[:200],
            },
        )


# LLM Exceptions
class LLMError(FarmInsightsError):
    """Base exception for inference (LLM) operations."""

    pass


class LLMUnavailableError(LLMError):
    """LLM provider is not available."""

    def __init__(self, provider: str, reason: str | None = None):
        super().__init__(
            f"LLM provider unavailable: {provider}" + (f" - {reason}" if reason else ""),
            code="LLM_UNAVAILABLE",
            details={"provider": provider, "reason": reason},
        )


class LLMTimeoutError(LLMError):
    """LLM request timed out."""

    def __init__(self, timeout: float, operation: str = "chat"):
        super().__init__(
            f"LLM {operation} timed out after {timeout} seconds",
            code="LLM_TIMEOUT",
            details={"timeout": timeout, "operation": operation},
        )


class LLMResponseError(LLMError):
    """LLM returned invalid or empty response."""

    def __init__(self, reason: str, response: str | None = None):
        super().__init__(
            f"Invalid LLM response: {reason}",
            code="LLM_RESPONSE_ERROR",
            details={"reason": reason, "response_preview": (response or "")[:200]},
        )


class ModelNotFoundError(LLMError):
    """Requested model not found."""

    def __init__(self, model: str, provider: str):
        super().__init__(
            f"Model '{model}' not found on {provider}",
            code="MODEL_NOT_FOUND",
            details={"model": model, "provider": provider},
        )


class CircuitBreakerOpenError(LLMError):
    """Circuit breaker is open due to repeated failures."""

    def __init__(self, provider: str, cooldown_remaining: int):
        super().__init__(
            f"Circuit breaker open for {provider}, retry in {cooldown_remaining}s",
            code="CIRCUIT_BREAKER_OPEN",
            details={"provider": provider, "cooldown_remaining": cooldown_remaining},
        )


# Validation Exceptions
class ValidationError(FarmInsightsError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class ConfigurationError(FarmInsightsError):
    """Configuration error."""

    pass
