from __future__ import annotations

import logging
from typing import Any

from google import genai
from google.genai import types

from cyberguard.providers.base import LLMProvider, register_provider

logger = logging.getLogger(__name__)


@register_provider("gemini")
class GeminiProvider(LLMProvider):
    name = "gemini"

    def __init__(self, api_key: str | None, model: str) -> None:
        super().__init__(api_key=api_key, model=model)
        if not api_key:
            raise ValueError("GEMINI_API_KEY is required for Gemini report generation")
        self._client = genai.Client(api_key=api_key)

    async def generate(self, prompt: str, schema: dict[str, Any]) -> str:
        logger.info("Requesting report from Gemini model %s", self.model)
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_json_schema=schema,
            ),
        )
        text = response.text
        if not text:
            raise RuntimeError("Gemini returned empty response")
        return text
