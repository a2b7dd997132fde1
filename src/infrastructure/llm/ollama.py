"""
Ollama LLM provider implementation.

HTTP client for the Ollama API used by the enhanced insight analyzers.
Requests ask for JSON-formatted output since every analyzer prompt expects
a JSON answer.
"""

import time
from typing import Any

import httpx

from src.config import get_logger, get_settings
from src.core.exceptions import (
    LLMResponseError,
    LLMUnavailableError,
    ModelNotFoundError,
)
from src.core.interfaces import HealthStatus, LLMResponse
from src.infrastructure.llm.base import BaseLLMProvider

logger = get_logger(__name__)


class OllamaProvider(BaseLLMProvider):
    """Ollama chat API provider."""

    provider_name = "ollama"

    def __init__(self, json_mode: bool = True):
        super().__init__()
        settings = get_settings()
        self.host = settings.llm.host.rstrip("/")
        self.model = settings.llm.model_name
        self.timeout = settings.llm.timeout
        self.max_tokens = settings.llm.max_tokens
        self.temperature = settings.llm.temperature
        self.json_mode = json_mode

    def _options(self, temperature: float | None, max_tokens: int | None) -> dict[str, Any]:
        return {
            "temperature": temperature if temperature is not None else self.temperature,
            "num_predict": max_tokens or self.max_tokens,
        }

    async def _make_request(self, endpoint: str, payload: dict) -> dict:
        """POST to the Ollama API and return the decoded body."""
        url = f"{self.host}/{endpoint}"

        async with httpx.AsyncClient(timeout=self.timeout + 5) as client:
            response = await client.post(url, json=payload, timeout=self.timeout)

        if response.status_code == 404:
            raise ModelNotFoundError(payload.get("model", "unknown"), self.provider_name)

        if response.status_code != 200:
            raise LLMUnavailableError(
                self.provider_name, f"HTTP {response.status_code}: {response.text[:200]}"
            )

        return response.json()

    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Chat completion with message history."""
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": msg.get("role", "user"), "content": msg.get("content", "")}
                for msg in messages
            ],
            "stream": False,
            "options": self._options(temperature, max_tokens),
        }
        if self.json_mode:
            payload["format"] = "json"

        async def _do_chat() -> LLMResponse:
            start_time = time.time()
            result = await self._make_request("api/chat", payload)
            elapsed = time.time() - start_time

            response_text = result.get("message", {}).get("content", "")
            if not response_text.strip():
                raise LLMResponseError("Empty chat response", response_text)

            prompt_tokens = result.get("prompt_eval_count", 0)
            completion_tokens = result.get("eval_count", 0)

            logger.info(
                "ollama_chat",
                model=self.model,
                messages=len(messages),
                response_len=len(response_text),
                elapsed_ms=int(elapsed * 1000),
            )
            return LLMResponse(
                text=response_text,
                model=self.model,
                done=result.get("done", True),
                done_reason=result.get("done_reason"),
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            )

        return await self._with_resilience(_do_chat)

    async def check_health(self) -> HealthStatus:
        """Check that Ollama is reachable and the model is installed."""
        start_time = time.time()

        try:
            async with httpx.AsyncClient(timeout=10) as client:
                response = await client.get(f"{self.host}/api/tags")
        except httpx.ConnectError:
            status = HealthStatus(
                available=False,
                provider=self.provider_name,
                error=f"Cannot connect to Ollama at {self.host}. Is 'ollama serve' running?",
            )
            self._update_health_cache(status)
            return status
        except httpx.HTTPError as e:
            status = HealthStatus(available=False, provider=self.provider_name, error=str(e))
            self._update_health_cache(status)
            return status

        if response.status_code != 200:
            status = HealthStatus(
                available=False,
                provider=self.provider_name,
                error=f"HTTP {response.status_code}",
            )
        else:
            models = [m.get("name", "") for m in response.json().get("models", [])]
            if not any(self.model in name for name in models):
                status = HealthStatus(
                    available=False,
                    provider=self.provider_name,
                    model=self.model,
                    error=f"Model '{self.model}' not installed. Run: ollama pull {self.model}",
                )
            else:
                status = HealthStatus(
                    available=True,
                    provider=self.provider_name,
                    model=self.model,
                    response_time_ms=(time.time() - start_time) * 1000,
                )

        self._update_health_cache(status)
        return status


# Singleton
_ollama_provider: OllamaProvider | None = None


def get_ollama_provider() -> OllamaProvider:
    """Get or create the Ollama provider singleton."""
    global _ollama_provider
    if _ollama_provider is None:
        _ollama_provider = OllamaProvider()
    return _ollama_provider


def reset_ollama_provider() -> None:
    """Drop the singleton (used by tests and settings reloads)."""
    global _ollama_provider
    _ollama_provider = None
