from app.ai.providers.openai_adapter import OpenAIAdapter


class MistralAdapter(OpenAIAdapter):
    """Mistral speaks the OpenAI chat-completions protocol."""

    tool_id = "mistral"
    name = "Mistral"
    model_setting = "MISTRAL_MODEL"
    base_url = "https://api.mistral.ai/v1"
