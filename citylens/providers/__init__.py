"""Vision model provider implementations."""

from citylens.providers.mock_provider import MockProvider
from citylens.providers.openai_provider import OpenAIProvider

__all__ = ["MockProvider", "OpenAIProvider"]
