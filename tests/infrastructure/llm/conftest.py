"""Fixtures for LLM provider tests."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.config.settings import LLMSettings
from src.infrastructure.llm.ollama import reset_ollama_provider


@pytest.fixture
def llm_settings() -> Iterator[MagicMock]:
    """Fast-retry LLM settings patched into every provider module."""
    settings = MagicMock()
    settings.llm = LLMSettings(max_retries=2, retry_delay=0.0, failure_threshold=2)

    with (
        patch("src.infrastructure.llm.base.get_settings", return_value=settings),
        patch("src.infrastructure.llm.ollama.get_settings", return_value=settings),
        patch("src.infrastructure.llm.factory.get_settings", return_value=settings),
    ):
        reset_ollama_provider()
        yield settings
        reset_ollama_provider()


@pytest.fixture
def http_client() -> Iterator[AsyncMock]:
    """The client yielded by httpx.AsyncClient inside the Ollama provider."""
    client = AsyncMock()
    with patch("src.infrastructure.llm.ollama.httpx.AsyncClient") as client_cls:
        client_cls.return_value.__aenter__.return_value = client
        yield client
