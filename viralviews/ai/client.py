"""Thin wrapper around the hosted Gemini model."""

from __future__ import annotations

import logging
from typing import Optional

from flask import current_app
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from viralviews.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class GenerationClient:
    """Generates text from a prompt. One attempt per call, no retries."""

    def __init__(self, api_key: Optional[str], model: str) -> None:
        self.api_key = api_key
        self.model = model
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if not self.api_key:
            raise ExternalServiceError("AI service is not configured")
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, prompt: str, temperature: float, max_output_tokens: int) -> str:
        """Return the model's text for ``prompt``.

        Raises:
            ExternalServiceError: if the model is unreachable, refuses, or
                returns no text.
        """
        client = self._get_client()
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                ),
            )
        except genai_errors.APIError as e:
            logger.error(f"Generation failed ({self.model}): {e}")
            raise ExternalServiceError("AI generation failed") from e

        if not response.text:
            logger.warning(f"Empty response from {self.model}")
            raise ExternalServiceError("AI generation returned no text")
        return response.text


def get_client() -> GenerationClient:
    """Return the app's shared client, creating it from config on first use."""
    client = current_app.extensions.get("ai_client")
    if client is None:
        client = GenerationClient(
            current_app.config.get("GEMINI_API_KEY"), current_app.config["AI_MODEL"]
        )
        current_app.extensions["ai_client"] = client
    return client
