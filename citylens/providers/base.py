"""Provider abstraction for vision model interactions."""

from __future__ import annotations

from typing import Any, Protocol


class VisionProvider(Protocol):
    """Interface implemented by all model providers."""

    def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        image_data_uri: str | None = None,
    ) -> dict[str, Any]:
        """Generate structured JSON from a prompt pair and an optional inline image."""
        ...
