"""
TASKFLOW API - Provider Adapter Base

Every LLM vendor is reached through the same two calls: parse_command
(strict JSON ChatCommand output) and general_chat (free conversation).
Adapters only translate to and from the vendor wire format.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from app.config import settings
from app.ai.errors import ProviderError

logger = logging.getLogger(__name__)


PARSE_SYSTEM_PROMPT = """You are a command parser for TaskFlow. Return ONLY strict JSON that matches the ChatCommand schema.
Do not wrap the JSON in markdown code fences and do not add any explanation.

ChatCommand schema:
{
  "action": "add_task" | "update_task" | "reschedule_task" | "complete_task" | "delete_task" | "list_today" | "search_tasks" | "check_availability_now",
  "taskId": string (optional),
  "listId": string (optional),
  "title": string (optional),
  "notes": string (optional),
  "due": ISO-8601 date or date-time string (optional),
  "completed": boolean (optional),
  "query": string (optional),
  "minutes": positive integer (optional)
}

Only include the fields relevant to the action."""

CHAT_SYSTEM_PROMPT = (
    "You are TaskFlow's assistant. Answer the user's question briefly and helpfully "
    "in plain text."
)

PARSE_TEMPERATURE = 0.2
CHAT_TEMPERATURE = 0.7


class ProviderAdapter(ABC):
    """Uniform prompt/key interface over one LLM vendor."""

    tool_id: str
    name: str
    # Name of the settings attribute holding the default model
    model_setting: str

    def __init__(self, model: Optional[str] = None, timeout: Optional[float] = None):
        self.model = model or getattr(settings, self.model_setting)
        self.timeout = timeout or settings.LLM_TIMEOUT

    async def parse_command(self, prompt: str, api_key: str) -> str:
        """Ask the vendor for a JSON ChatCommand. Returns the raw text."""
        return await self._complete(PARSE_SYSTEM_PROMPT, prompt, api_key, PARSE_TEMPERATURE)

    async def general_chat(self, prompt: str, api_key: str) -> str:
        return await self._complete(CHAT_SYSTEM_PROMPT, prompt, api_key, CHAT_TEMPERATURE)

    @abstractmethod
    async def _complete(self, system: str, prompt: str, api_key: str, temperature: float) -> str:
        pass

    async def _post_json(
        self,
        url: str,
        payload: dict,
        headers: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> dict:
        """POST a JSON body and return the decoded JSON answer."""
        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(
                    url,
                    json=payload,
                    headers=headers,
                    params=params,
                    timeout=self.timeout,
                )
            except httpx.HTTPError as e:
                logger.warning(f"{self.name} request failed: {type(e).__name__}")
                raise ProviderError(self.tool_id) from e

        if response.status_code >= 400:
            logger.warning(f"{self.name} returned {response.status_code}")
            raise ProviderError(self.tool_id, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(self.tool_id, response.status_code, "invalid response body") from e

    def _unexpected_shape(self, error: Exception) -> ProviderError:
        logger.warning(f"{self.name} response had an unexpected shape: {error!r}")
        return ProviderError(self.tool_id, detail="unexpected response shape")
