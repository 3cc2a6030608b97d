"""
TASKFLOW API - Anthropic Adapter

Messages API with the system instruction passed separately.
"""

from app.ai.providers.base import ProviderAdapter

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
MAX_TOKENS = 1024


class AnthropicAdapter(ProviderAdapter):
    tool_id = "anthropic"
    name = "Anthropic"
    model_setting = "ANTHROPIC_MODEL"

    async def _complete(self, system: str, prompt: str, api_key: str, temperature: float) -> str:
        data = await self._post_json(
            ANTHROPIC_URL,
            {
                "model": self.model,
                "max_tokens": MAX_TOKENS,
                "system": system,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": temperature,
            },
            headers={
                "x-api-key": api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
        )
        try:
            return data["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise self._unexpected_shape(e) from e
