"""
TASKFLOW API - Gemini Adapter

generateContent with system and user text joined into one part.
"""

from app.ai.providers.base import ProviderAdapter

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiAdapter(ProviderAdapter):
    tool_id = "google"
    name = "Google Gemini"
    model_setting = "GEMINI_MODEL"

    async def _complete(self, system: str, prompt: str, api_key: str, temperature: float) -> str:
        data = await self._post_json(
            f"{GEMINI_BASE_URL}/{self.model}:generateContent",
            {
                "contents": [{"role": "user", "parts": [{"text": f"{system}\n\n{prompt}"}]}],
                "generationConfig": {"temperature": temperature},
            },
            params={"key": api_key},
        )
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise self._unexpected_shape(e) from e
