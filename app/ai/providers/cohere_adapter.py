from app.ai.providers.base import ProviderAdapter

COHERE_URL = "https://api.cohere.ai/v1/chat"


class CohereAdapter(ProviderAdapter):
    """Cohere chat takes a single message string."""

    tool_id = "cohere"
    name = "Cohere"
    model_setting = "COHERE_MODEL"

    async def _complete(self, system: str, prompt: str, api_key: str, temperature: float) -> str:
        data = await self._post_json(
            COHERE_URL,
            {
                "model": self.model,
                "message": f"{system}\n\n{prompt}",
                "temperature": temperature,
            },
            headers={"Authorization": f"Bearer {api_key}"},
        )
        try:
            return data["text"]
        except (KeyError, TypeError) as e:
            raise self._unexpected_shape(e) from e
