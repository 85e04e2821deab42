"""Provider construction from settings."""

from __future__ import annotations

from typing import Any

from citylens.config import CityLensSettings
from citylens.providers.base import VisionProvider
from citylens.providers.mock_provider import MockProvider
from citylens.providers.openai_provider import OpenAIProvider


def create_provider(settings: CityLensSettings) -> VisionProvider:
    """Create a vision provider instance from resolved settings."""
    if settings.provider == "openai":
        return OpenAIProvider(model=settings.model)
    if settings.provider == "mock":
        return MockProvider.describing(settings.mock_description)
    raise ValueError("provider must be one of: mock, openai.")


class LazyProvider:
    """Defers provider construction (and its credential checks) to the first call."""

    def __init__(self, settings: CityLensSettings) -> None:
        self._settings = settings
        self._provider: VisionProvider | None = None

    def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        image_data_uri: str | None = None,
    ) -> dict[str, Any]:
        if self._provider is None:
            self._provider = create_provider(self._settings)
        return self._provider.generate_json(
            system_prompt, user_prompt, image_data_uri=image_data_uri
        )
