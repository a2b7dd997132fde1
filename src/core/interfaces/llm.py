"""
Inference service port.

Enhanced weather, financial and growth analyzers ask an LLM for JSON
answers through this contract; infrastructure supplies the Ollama client.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class LLMResponse:
    """One completed (non-streamed) inference answer."""

    text: str
    model: str
    done: bool = True
    done_reason: str | None = None
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    error: str | None = None


@dataclass
class HealthStatus:
    """Reachability of the inference service and its configured model."""

    available: bool
    provider: str
    model: str | None = None
    error: str | None = None
    response_time_ms: float | None = None


class ILLMProvider(ABC):
    """
    Inference service used by the enhanced insight tier.

    Implementations raise LLMError subclasses on failure; callers treat any
    failure as a signal to fall back to rule-based analysis.
    """

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Completion over a role-tagged message list.

        Args:
            messages: [{"role": "system"|"user"|"assistant", "content": "..."}]
            temperature: Sampling temperature; provider default when None
            max_tokens: Output budget; provider default when None
        """

    @abstractmethod
    async def check_health(self) -> HealthStatus:
        """Probe the service and report whether the model is usable."""

    @abstractmethod
    def is_available(self) -> bool:
        """Cached, non-blocking availability (False while the circuit is open)."""
