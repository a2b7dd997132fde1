"""Tests for OllamaProvider with a mocked HTTP client."""

import httpx
import pytest

from src.core.exceptions import LLMResponseError, LLMUnavailableError, ModelNotFoundError
from src.infrastructure.llm.ollama import OllamaProvider


@pytest.fixture
def provider(llm_settings) -> OllamaProvider:
    return OllamaProvider()


class TestChat:
    async def test_chat(self, provider, http_client):
        http_client.post.return_value = httpx.Response(
            200,
            json={
                "message": {"role": "assistant", "content": '{"weather": []}'},
                "done": True,
                "prompt_eval_count": 12,
                "eval_count": 8,
            },
        )

        result = await provider.chat(
            [
                {"role": "system", "content": "You are an agronomist"},
                {"content": "Current weather: 31C"},
            ]
        )

        assert result.text == '{"weather": []}'
        assert result.model == "llama3.1:8b"
        assert result.total_tokens == 20

        url = http_client.post.await_args.args[0]
        payload = http_client.post.await_args.kwargs["json"]
        assert url == "http://localhost:11434/api/chat"
        assert payload["messages"][1] == {"role": "user", "content": "Current weather: 31C"}
        assert payload["format"] == "json"
        assert payload["stream"] is False
        assert payload["options"]["temperature"] == 0.3

    async def test_chat_without_json_mode(self, llm_settings, http_client):
        http_client.post.return_value = httpx.Response(
            200, json={"message": {"role": "assistant", "content": "plain text"}}
        )

        await OllamaProvider(json_mode=False).chat(
            [{"role": "user", "content": "hello"}], temperature=0.9
        )

        payload = http_client.post.await_args.kwargs["json"]
        assert "format" not in payload
        assert payload["options"]["temperature"] == 0.9

    async def test_chat_empty_reply(self, provider, http_client):
        http_client.post.return_value = httpx.Response(200, json={"message": {}})

        with pytest.raises(LLMResponseError, match="Empty chat response"):
            await provider.chat([{"role": "user", "content": "hi"}])

        assert provider.circuit_breaker.failures == 0

    async def test_model_not_found(self, provider, http_client):
        http_client.post.return_value = httpx.Response(404, text="model not found")

        with pytest.raises(ModelNotFoundError):
            await provider.chat([{"role": "user", "content": "hi"}])

    async def test_server_error_counts_as_failure(self, provider, http_client):
        http_client.post.return_value = httpx.Response(500, text="internal error")

        with pytest.raises(LLMUnavailableError):
            await provider.chat([{"role": "user", "content": "hi"}])

        assert provider.circuit_breaker.failures == 1

    async def test_connection_refused(self, provider, http_client):
        http_client.post.side_effect = httpx.ConnectError("Connection refused")

        with pytest.raises(LLMUnavailableError):
            await provider.chat([{"role": "user", "content": "hi"}])

        assert http_client.post.await_count == 2


class TestCheckHealth:
    async def test_model_installed(self, provider, http_client):
        http_client.get.return_value = httpx.Response(
            200, json={"models": [{"name": "llama3.1:8b"}, {"name": "mistral:7b"}]}
        )

        status = await provider.check_health()

        assert status.available is True
        assert status.model == "llama3.1:8b"
        assert provider.is_available() is True

    async def test_model_missing(self, provider, http_client):
        http_client.get.return_value = httpx.Response(200, json={"models": [{"name": "mistral:7b"}]})

        status = await provider.check_health()

        assert status.available is False
        assert "ollama pull llama3.1:8b" in status.error
        assert provider.is_available() is False

    async def test_unreachable(self, provider, http_client):
        http_client.get.side_effect = httpx.ConnectError("refused")

        status = await provider.check_health()

        assert status.available is False
        assert "ollama serve" in status.error

    async def test_http_error(self, provider, http_client):
        http_client.get.return_value = httpx.Response(503)

        status = await provider.check_health()

        assert status.available is False
        assert status.error == "HTTP 503"
