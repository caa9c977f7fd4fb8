from __future__ import annotations

import copy
import logging
from typing import Any

from cyberguard.providers.base import LLMProvider, register_provider

logger = logging.getLogger(__name__)


def _strict_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``schema`` that satisfies OpenAI strict structured outputs.

    Strict mode requires every object to forbid additional properties.
    """
    strict = copy.deepcopy(schema)
    pending: list[dict[str, Any]] = [strict]
    while pending:
        node = pending.pop()
        if node.get("type") == "object":
            node["additionalProperties"] = False
            pending.extend(node.get("properties", {}).values())
        elif node.get("type") == "array" and isinstance(node.get("items"), dict):
            pending.append(node["items"])
    return strict


@register_provider("openai")
class OpenAIProvider(LLMProvider):
    name = "openai"

    def __init__(self, api_key: str | None, model: str) -> None:
        super().__init__(api_key=api_key, model=model)
        if not api_key:
            raise ValueError("OPENAI_API_KEY is required for OpenAI report generation")
        try:
            from openai import AsyncOpenAI
        except ImportError as exc:  # pragma: no cover
            raise RuntimeError("Install optional dependency: pip install 'cyberguard-scanner[openai]'") from exc

        self._client = AsyncOpenAI(api_key=api_key)

    async def generate(self, prompt: str, schema: dict[str, Any]) -> str:
        logger.info("Requesting report from OpenAI model %s", self.model)
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "vulnerability_report",
                    "schema": _strict_schema(schema),
                    "strict": True,
                },
            },
        )

        content = response.choices[0].message.content
        if not content:
            raise RuntimeError("OpenAI returned empty response")
        return content
