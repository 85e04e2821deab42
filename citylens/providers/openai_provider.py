"""OpenAI-backed vision provider used for image descriptions."""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any

from openai import APIError, OpenAI

from citylens.security import redact_sensitive_text

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """Vision provider implementation using the OpenAI Python SDK.

    Each call is a single round trip: the SDK's own retry loop is disabled.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
        max_output_tokens: int = 1_000,
    ) -> None:
        """Initialize provider with API key and model settings."""
        resolved_api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not resolved_api_key:
            raise ValueError("OPENAI_API_KEY is required for OpenAIProvider.")
        self.client = OpenAI(api_key=resolved_api_key, max_retries=0)
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        image_data_uri: str | None = None,
    ) -> dict[str, Any]:
        """Generate structured JSON from the configured model."""
        user_content: list[dict[str, Any]] = [{"type": "text", "text": user_prompt}]
        if image_data_uri is not None:
            user_content.append({"type": "image_url", "image_url": {"url": image_data_uri}})
        payload = {
            "model": self.model,
            "temperature": self.temperature,
            "max_completion_tokens": self.max_output_tokens,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "response_format": {"type": "json_object"},
        }
        logger.debug("Requesting completion from %s.", self.model)
        try:
            response = self.client.chat.completions.create(**payload)  # type: ignore[call-overload]
        except APIError as exc:
            logger.warning(
                "OpenAI request failed: %s", redact_sensitive_text(str(exc))
            )
            raise
        message = response.choices[0].message.content
        if message is None:
            raise RuntimeError("Model returned empty message content.")
        return _parse_json_response(str(message))


def _parse_json_response(raw_text: str) -> dict[str, Any]:
    """Parse a JSON object from possibly noisy model output."""
    cleaned = raw_text.strip()
    if cleaned.startswith("```"):
        cleaned = re.sub(r"^```[a-zA-Z0-9_-]*\s*", "", cleaned)
        cleaned = re.sub(r"\s*```$", "", cleaned)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", cleaned, flags=re.DOTALL)
        if not match:
            raise ValueError("Model output did not contain JSON.") from None
        parsed = json.loads(match.group(0))
    if not isinstance(parsed, dict):
        raise ValueError("Expected top-level JSON object from model.")
    return parsed
