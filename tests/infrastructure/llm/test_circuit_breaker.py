"""Tests for the LLM circuit breaker and resilience wrapper."""

import time
from unittest.mock import AsyncMock

import httpx
import pytest

from src.core.exceptions import (
    CircuitBreakerOpenError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from src.infrastructure.llm.base import CircuitBreakerState
from src.infrastructure.llm.ollama import OllamaProvider


class TestCircuitBreakerState:
    """Tests for CircuitBreakerState."""

    def test_starts_closed(self):
        breaker = CircuitBreakerState()
        breaker.check()
        assert breaker.is_open is False
        assert breaker.cooldown_remaining == 0

    def test_opens_at_threshold(self):
        breaker = CircuitBreakerState(provider="ollama", failure_threshold=3)

        breaker.record_failure()
        breaker.record_failure()
        assert breaker.is_open is False

        breaker.record_failure()
        assert breaker.is_open is True

        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            breaker.check()
        assert exc_info.value.code == "CIRCUIT_BREAKER_OPEN"

    def test_half_open_after_cooldown(self):
        breaker = CircuitBreakerState(failure_threshold=1, cooldown_seconds=60)
        breaker.record_failure()
        breaker.last_failure_time = time.time() - 61

        assert breaker.cooldown_remaining == 0
        breaker.check()

    def test_success_closes(self):
        breaker = CircuitBreakerState(failure_threshold=1)
        breaker.record_failure()

        breaker.record_success()

        assert breaker.is_open is False
        assert breaker.failures == 0


class TestWithResilience:
    """Tests for BaseLLMProvider._with_resilience via OllamaProvider."""

    @pytest.fixture
    def provider(self, llm_settings) -> OllamaProvider:
        return OllamaProvider()

    async def test_success(self, provider):
        operation = AsyncMock(return_value="ok")

        assert await provider._with_resilience(operation) == "ok"
        assert provider.circuit_breaker.failures == 0

    async def test_connection_error_retried_then_unavailable(self, provider):
        operation = AsyncMock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(LLMUnavailableError):
            await provider._with_resilience(operation)

        assert operation.await_count == 2
        assert provider.circuit_breaker.failures == 1

    async def test_transient_error_recovers(self, provider):
        operation = AsyncMock(side_effect=[httpx.ConnectError("refused"), "ok"])

        assert await provider._with_resilience(operation) == "ok"
        assert provider.circuit_breaker.failures == 0

    async def test_timeout(self, provider):
        operation = AsyncMock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(LLMTimeoutError):
            await provider._with_resilience(operation)

        assert provider.circuit_breaker.failures == 1

    async def test_bad_answer_does_not_trip_circuit(self, provider):
        operation = AsyncMock(side_effect=LLMResponseError("Empty chat response"))

        with pytest.raises(LLMResponseError):
            await provider._with_resilience(operation)

        assert operation.await_count == 1
        assert provider.circuit_breaker.failures == 0

    async def test_open_circuit_fails_fast(self, provider):
        operation = AsyncMock(side_effect=httpx.ConnectError("refused"))
        for _ in range(2):
            with pytest.raises(LLMUnavailableError):
                await provider._with_resilience(operation)
        operation.reset_mock()

        with pytest.raises(CircuitBreakerOpenError):
            await provider._with_resilience(operation)

        operation.assert_not_called()
        assert provider.is_available() is False
