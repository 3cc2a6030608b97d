"""
TASKFLOW API - Provider Registry

Maps a client tool id to its adapter. Unknown ids are rejected before any
network call is made.
"""

from typing import Dict, Iterable, List

from app.errors import ValidationError
from app.ai.providers.base import ProviderAdapter
from app.ai.providers.anthropic_adapter import AnthropicAdapter
from app.ai.providers.cohere_adapter import CohereAdapter
from app.ai.providers.gemini_adapter import GeminiAdapter
from app.ai.providers.mistral_adapter import MistralAdapter
from app.ai.providers.openai_adapter import OpenAIAdapter


class ProviderRegistry:

    def __init__(self, adapters: Iterable[ProviderAdapter]):
        self._adapters: Dict[str, ProviderAdapter] = {a.tool_id: a for a in adapters}

    def get(self, tool_id: str) -> ProviderAdapter:
        adapter = self._adapters.get((tool_id or "").lower())
        if adapter is None:
            raise ValidationError(f"Unknown toolId: {tool_id}")
        return adapter

    def tool_ids(self) -> List[str]:
        return list(self._adapters)


def build_default_registry() -> ProviderRegistry:
    return ProviderRegistry(
        [
            OpenAIAdapter(),
            AnthropicAdapter(),
            GeminiAdapter(),
            MistralAdapter(),
            CohereAdapter(),
        ]
    )


default_registry = build_default_registry()


def get_provider_registry() -> ProviderRegistry:
    """Dependency returning the provider registry."""
    return default_registry
