"""
TASKFLOW API - OpenAI Adapter

Chat completions through the official SDK. Also serves OpenAI-compatible
vendors via base_url.
"""

import logging
from typing import Optional

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from app.ai.errors import ProviderError
from app.ai.providers.base import ProviderAdapter

logger = logging.getLogger(__name__)


class OpenAIAdapter(ProviderAdapter):
    tool_id = "openai"
    name = "OpenAI"
    model_setting = "OPENAI_MODEL"
    base_url: Optional[str] = None

    def _client(self, api_key: str) -> AsyncOpenAI:
        # No SDK retries; a failed call goes straight to the fallback path
        return AsyncOpenAI(
            api_key=api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
        )

    async def _complete(self, system: str, prompt: str, api_key: str, temperature: float) -> str:
        client = self._client(api_key)
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
            )
        except APIStatusError as e:
            logger.warning(f"{self.name} returned {e.status_code}")
            raise ProviderError(self.tool_id, e.status_code) from e
        except APIConnectionError as e:
            logger.warning(f"{self.name} unreachable: {type(e).__name__}")
            raise ProviderError(self.tool_id) from e

        try:
            content = response.choices[0].message.content
        except (IndexError, AttributeError) as e:
            raise self._unexpected_shape(e) from e
        if content is None:
            raise ProviderError(self.tool_id, detail="empty completion")
        return content
