"""Test provider that returns queued JSON responses."""

from __future__ import annotations

from collections.abc import Iterable
from copy import deepcopy
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RecordedPrompt:
    """One prompt pair seen by the mock provider."""

    system_prompt: str
    user_prompt: str
    image_data_uri: str | None


class MockProvider:
    """A deterministic provider for unit/integration tests and offline demos."""

    def __init__(self, responses: Iterable[dict[str, Any]], *, repeat: bool = False) -> None:
        """Initialize mock provider with queued JSON responses.

        With ``repeat`` the last queued response is served indefinitely.
        """
        self._responses = [deepcopy(item) for item in responses]
        self._repeat = repeat
        self.prompts: list[RecordedPrompt] = []

    @classmethod
    def describing(cls, description: str) -> MockProvider:
        """Build a provider that always returns the given description."""
        return cls([{"description": description}], repeat=True)

    def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        image_data_uri: str | None = None,
    ) -> dict[str, Any]:
        """Return next queued response and record prompts."""
        self.prompts.append(RecordedPrompt(system_prompt, user_prompt, image_data_uri))
        if not self._responses:
            raise RuntimeError("MockProvider has no remaining responses.")
        if self._repeat and len(self._responses) == 1:
            return deepcopy(self._responses[0])
        return deepcopy(self._responses.pop(0))
