"""Provider registry."""

from cyberguard.providers.base import (
    LLMProvider,
    available_providers,
    create_provider,
    register_provider,
)
from cyberguard.providers.gemini_provider import GeminiProvider
from cyberguard.providers.openai_provider import OpenAIProvider

__all__ = [
    "GeminiProvider",
    "LLMProvider",
    "OpenAIProvider",
    "available_providers",
    "create_provider",
    "register_provider",
]
