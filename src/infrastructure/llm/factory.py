"""
LLM provider factory.

Creates the configured provider, or none when inference is disabled.
"""

from typing import Any

from src.config import get_logger, get_settings
from src.core.exceptions import ConfigurationError
from src.core.interfaces import ILLMProvider

logger = get_logger(__name__)


def get_llm_provider(provider_type: str | None = None) -> ILLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_type: Provider name (default from settings)

    Raises:
        ConfigurationError: Unknown provider
    """
    provider_type = provider_type or get_settings().llm.provider

    if provider_type == "ollama":
        from src.infrastructure.llm.ollama import get_ollama_provider

        return get_ollama_provider()

    raise ConfigurationError(
        f"Unknown LLM provider: {provider_type}",
        code="UNKNOWN_LLM_PROVIDER",
        details={"provider": provider_type},
    )


def get_optional_llm_provider() -> ILLMProvider | None:
    """The configured provider, or None when inference is disabled."""
    if not get_settings().llm.enabled:
        logger.info("llm_disabled")
        return None
    return get_llm_provider()


async def check_llm_health() -> dict[str, Any]:
    """Health of the configured LLM provider."""
    settings = get_settings()

    if not settings.llm.enabled:
        return {
            "primary": {
                "available": False,
                "provider": settings.llm.provider,
                "error": "LLM disabled by configuration",
            }
        }

    try:
        health = await get_llm_provider().check_health()
        return {"primary": health.__dict__}
    except Exception as e:
        logger.warning("llm_health_check_failed", error=str(e))
        return {
            "primary": {
                "available": False,
                "provider": settings.llm.provider,
                "error": str(e),
            }
        }
