from __future__ import annotations

import json
from typing import Any

import pytest

from cyberguard.providers.base import LLMProvider

SIX_SEVERITIES = ["Critical", "High", "High", "Medium", "Low", "Informational"]


def make_payload(severities: list[str] | None = None) -> dict[str, Any]:
    severities = SIX_SEVERITIES if severities is None else severities
    return {
        "executiveSummary": "The application exposes several high-risk weaknesses.",
        "vulnerabilities": [
            {
                "id": f"A0{index}:2021",
                "title": f"Finding {index}",
                "severity": severity,
                "description": "Details of the weakness.",
                "impact": "Attackers could read customer data.",
                "remediation": "Apply the vendor patch.",
                "standard": "OWASP Top 10",
            }
            for index, severity in enumerate(severities, start=1)
        ],
    }


class StubProvider(LLMProvider):
    name = "stub"

    def __init__(self, response: str | Exception) -> None:
        super().__init__(api_key="test-key", model="test-model")
        self.response = response
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def generate(self, prompt: str, schema: dict[str, Any]) -> str:
        self.calls.append((prompt, schema))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def report_payload() -> dict[str, Any]:
    return make_payload()


@pytest.fixture
def stub_provider(report_payload) -> StubProvider:
    return StubProvider(json.dumps(report_payload))
