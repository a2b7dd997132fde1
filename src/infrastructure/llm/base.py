"""
Base LLM provider with retry and circuit breaker patterns.

Inference is optional for the insight engine: when the circuit is open the
provider fails fast so enhanced analyzers fall back to their rule-based tier
without waiting on a dead service.
"""

import time
from abc import ABC
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar, cast

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config import get_logger, get_settings
from src.core.exceptions import (
    CircuitBreakerOpenError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from src.core.interfaces import HealthStatus, ILLMProvider

logger = get_logger(__name__)

T = TypeVar("T")

# Transient failures worth retrying
TIMEOUT_ERRORS: tuple[type[BaseException], ...] = (TimeoutError, httpx.TimeoutException)
CONNECTION_ERRORS: tuple[type[BaseException], ...] = (
    ConnectionError,
    httpx.ConnectError,
    httpx.RemoteProtocolError,
)


@dataclass
class CircuitBreakerState:
    """Consecutive-failure circuit breaker for one provider."""

    provider: str = "llm"
    failures: int = 0
    last_failure_time: float = 0.0
    is_open: bool = False
    cooldown_seconds: int = 60
    failure_threshold: int = 3

    def record_failure(self) -> None:
        """Count a failure; open the circuit at the threshold."""
        self.failures += 1
        self.last_failure_time = time.time()

        if self.failures >= self.failure_threshold and not self.is_open:
            self.is_open = True
            logger.warning(
                "circuit_breaker_opened",
                provider=self.provider,
                failures=self.failures,
                cooldown=self.cooldown_seconds,
            )

    def record_success(self) -> None:
        """Reset the failure count and close the circuit."""
        if self.is_open:
            logger.info("circuit_breaker_closed", provider=self.provider)
        self.failures = 0
        self.is_open = False

    def check(self) -> None:
        """
        Allow or reject a request.

        Raises:
            CircuitBreakerOpenError: Circuit open and cooldown not elapsed
        """
        if not self.is_open:
            return

        remaining = self.cooldown_remaining
        if remaining > 0:
            raise CircuitBreakerOpenError(self.provider, remaining)

        # Cooldown elapsed: let one probe request through
        logger.info("circuit_breaker_half_open", provider=self.provider)

    @property
    def cooldown_remaining(self) -> int:
        """Seconds remaining in cooldown."""
        if not self.is_open:
            return 0
        elapsed = time.time() - self.last_failure_time
        return max(0, int(self.cooldown_seconds - elapsed))


class BaseLLMProvider(ILLMProvider, ABC):
    """
    Base class for LLM providers with resilience patterns.

    Provides:
    - Retries with exponential backoff on timeouts and connection errors
    - Circuit breaker that fails fast after repeated failures
    - Health check caching
    """

    provider_name = "llm"

    def __init__(self) -> None:
        settings = get_settings()
        self.circuit_breaker = CircuitBreakerState(
            provider=self.provider_name,
            failure_threshold=settings.llm.failure_threshold,
            cooldown_seconds=settings.llm.cooldown_seconds,
        )
        self._health_cache: HealthStatus | None = None
        self._health_cache_time: float = 0.0
        self._health_cache_ttl: float = 30.0

    def _retrying(self) -> AsyncRetrying:
        settings = get_settings().llm
        return AsyncRetrying(
            stop=stop_after_attempt(settings.attempts),
            wait=wait_exponential(
                multiplier=settings.retry_delay,
                min=settings.retry_delay,
                max=settings.max_backoff,
            ),
            retry=retry_if_exception_type(TIMEOUT_ERRORS + CONNECTION_ERRORS),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "llm_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _with_resilience(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Execute operation with retry and circuit breaker.

        Raises:
            CircuitBreakerOpenError: If circuit is open
            LLMTimeoutError: If operation times out
            LLMUnavailableError: If provider is unreachable
        """
        self.circuit_breaker.check()

        try:
            result = await self._retrying()(operation, *args, **kwargs)
        except TIMEOUT_ERRORS:
            self.circuit_breaker.record_failure()
            raise LLMTimeoutError(get_settings().llm.timeout) from None
        except (*CONNECTION_ERRORS, OSError) as e:
            self.circuit_breaker.record_failure()
            raise LLMUnavailableError(self.provider_name, str(e)) from e
        except LLMUnavailableError:
            self.circuit_breaker.record_failure()
            raise
        except Exception as e:
            # Bad answers don't trip the circuit
            logger.error("llm_error", error=str(e), error_type=type(e).__name__)
            raise

        self.circuit_breaker.record_success()
        return cast(T, result)

    def is_available(self) -> bool:
        """Cached, non-blocking availability check."""
        if self.circuit_breaker.is_open:
            return False

        now = time.time()
        if self._health_cache and (now - self._health_cache_time) < self._health_cache_ttl:
            return self._health_cache.available

        return True  # Optimistic until an async health check says otherwise

    def _update_health_cache(self, status: HealthStatus) -> None:
        self._health_cache = status
        self._health_cache_time = time.time()
