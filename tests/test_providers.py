"""
TASKFLOW API - Provider Adapter Tests

Vendor wire formats with the HTTP layer mocked out.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from app.errors import ValidationError
from app.ai.errors import ProviderError
from app.ai.providers.anthropic_adapter import AnthropicAdapter
from app.ai.providers.base import CHAT_SYSTEM_PROMPT, PARSE_SYSTEM_PROMPT
from app.ai.providers.cohere_adapter import CohereAdapter
from app.ai.providers.gemini_adapter import GeminiAdapter
from app.ai.providers.mistral_adapter import MistralAdapter
from app.ai.providers.openai_adapter import OpenAIAdapter
from app.ai.providers.registry import build_default_registry


def _mock_http(mock_client_class, status_code=200, payload=None):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.json.return_value = payload or {}

    mock_client = AsyncMock()
    mock_client.__aenter__.return_value = mock_client
    mock_client.__aexit__.return_value = None
    mock_client.post = AsyncMock(return_value=mock_response)
    mock_client_class.return_value = mock_client
    return mock_client


class TestAnthropicAdapter:

    @patch("app.ai.providers.base.httpx.AsyncClient")
    async def test_parse_command_request(self, mock_client_class):
        mock_client = _mock_http(mock_client_class, payload={"content": [{"type": "text", "text": '{"action":"list_today"}'}]})

        result = await AnthropicAdapter(model="claude-test").parse_command("what's due", "sk-ant")

        assert result == '{"action":"list_today"}'
        url = mock_client.post.call_args.args[0]
        kwargs = mock_client.post.call_args.kwargs
        assert url == "https://api.anthropic.com/v1/messages"
        assert kwargs["headers"]["x-api-key"] == "sk-ant"
        assert kwargs["headers"]["anthropic-version"] == "2023-06-01"
        assert kwargs["json"]["system"] == PARSE_SYSTEM_PROMPT
        assert kwargs["json"]["messages"] == [{"role": "user", "content": "what's due"}]
        assert kwargs["json"]["model"] == "claude-test"

    @patch("app.ai.providers.base.httpx.AsyncClient")
    async def test_non_2xx_raises_with_status(self, mock_client_class):
        _mock_http(mock_client_class, status_code=401)

        with pytest.raises(ProviderError) as exc_info:
            await AnthropicAdapter().general_chat("hi", "bad-key")
        assert exc_info.value.upstream_status == 401

    @patch("app.ai.providers.base.httpx.AsyncClient")
    async def test_transport_error(self, mock_client_class):
        mock_client = _mock_http(mock_client_class)
        mock_client.post.side_effect = httpx.ConnectError("boom")

        with pytest.raises(ProviderError) as exc_info:
            await AnthropicAdapter().general_chat("hi", "key")
        assert exc_info.value.upstream_status is None

    @patch("app.ai.providers.base.httpx.AsyncClient")
    async def test_unexpected_shape(self, mock_client_class):
        _mock_http(mock_client_class, payload={"content": []})

        with pytest.raises(ProviderError):
            await AnthropicAdapter().general_chat("hi", "key")


class TestGeminiAdapter:

    @patch("app.ai.providers.base.httpx.AsyncClient")
    async def test_concatenates_system_and_prompt(self, mock_client_class):
        mock_client = _mock_http(
            mock_client_class,
            payload={"candidates": [{"content": {"parts": [{"text": "Sunny."}]}}]},
        )

        result = await GeminiAdapter(model="gemini-test").general_chat("weather in Paris", "g-key")

        assert result == "Sunny."
        url = mock_client.post.call_args.args[0]
        kwargs = mock_client.post.call_args.kwargs
        assert url.endswith("/models/gemini-test:generateContent")
        assert kwargs["params"] == {"key": "g-key"}
        parts = kwargs["json"]["contents"][0]["parts"]
        assert parts == [{"text": f"{CHAT_SYSTEM_PROMPT}\n\nweather in Paris"}]

    def test_tool_id_is_google(self):
        assert GeminiAdapter().tool_id == "google"


class TestCohereAdapter:

    @patch("app.ai.providers.base.httpx.AsyncClient")
    async def test_single_message(self, mock_client_class):
        mock_client = _mock_http(mock_client_class, payload={"text": "hello"})

        result = await CohereAdapter().general_chat("hi", "co-key")

        assert result == "hello"
        kwargs = mock_client.post.call_args.kwargs
        assert kwargs["headers"]["Authorization"] == "Bearer co-key"
        assert kwargs["json"]["message"].endswith("\n\nhi")
        assert "messages" not in kwargs["json"]


class TestOpenAIAdapter:

    def _completion(self, content):
        completion = MagicMock()
        completion.choices = [MagicMock()]
        completion.choices[0].message.content = content
        return completion

    @patch("app.ai.providers.openai_adapter.AsyncOpenAI")
    async def test_messages_array(self, mock_openai_class):
        mock_client = MagicMock()
        mock_client.chat.completions.create = AsyncMock(return_value=self._completion('{"action":"list_today"}'))
        mock_openai_class.return_value = mock_client

        result = await OpenAIAdapter(model="gpt-test").parse_command("what's due", "sk-1")

        assert result == '{"action":"list_today"}'
        assert mock_openai_class.call_args.kwargs["api_key"] == "sk-1"
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["messages"] == [
            {"role": "system", "content": PARSE_SYSTEM_PROMPT},
            {"role": "user", "content": "what's due"},
        ]

    @patch("app.ai.providers.openai_adapter.AsyncOpenAI")
    async def test_connection_error(self, mock_openai_class):
        mock_client = MagicMock()
        mock_client.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1"))
        )
        mock_openai_class.return_value = mock_client

        with pytest.raises(ProviderError) as exc_info:
            await OpenAIAdapter().general_chat("hi", "sk-1")
        assert exc_info.value.upstream_status is None

    @patch("app.ai.providers.openai_adapter.AsyncOpenAI")
    async def test_mistral_uses_its_base_url(self, mock_openai_class):
        mock_client = MagicMock()
        mock_client.chat.completions.create = AsyncMock(return_value=self._completion("hi"))
        mock_openai_class.return_value = mock_client

        adapter = MistralAdapter()
        assert await adapter.general_chat("hi", "m-key") == "hi"
        assert mock_openai_class.call_args.kwargs["base_url"] == "https://api.mistral.ai/v1"
        assert adapter.tool_id == "mistral"


class TestRegistry:

    def test_all_tools_registered(self):
        assert sorted(build_default_registry().tool_ids()) == ["anthropic", "cohere", "google", "mistral", "openai"]

    def test_unknown_tool(self):
        with pytest.raises(ValidationError):
            build_default_registry().get("llama")
