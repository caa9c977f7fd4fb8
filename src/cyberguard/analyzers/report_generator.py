from __future__ import annotations

import json
import logging

from cyberguard.analyzers.request_builder import build_report_request
from cyberguard.models.reports import VulnerabilityReport
from cyberguard.models.targets import ScanOptions
from cyberguard.providers.base import LLMProvider

GENERATION_FAILED_MESSAGE = (
    "Failed to generate the vulnerability report. The AI model may be temporarily "
    "unavailable or the request could not be processed."
)

logger = logging.getLogger(__name__)


class ReportGenerationError(Exception):
    def __init__(self, message: str = GENERATION_FAILED_MESSAGE) -> None:
        super().__init__(message)


def parse_report(text: str) -> VulnerabilityReport:
    data = json.loads(text.strip())
    if not isinstance(data, dict):
        raise ValueError("Generated report has an invalid structure.")
    return VulnerabilityReport.model_validate(data)


class ReportGenerator:
    """Turns a target and its selected standards into a validated report.

    Every failure (provider/transport error, non-JSON text, structurally
    invalid payload) surfaces as one ``ReportGenerationError``; the cause is
    only logged.
    """

    def __init__(self, provider: LLMProvider) -> None:
        self.provider = provider

    async def generate_report(self, url: str, options: ScanOptions) -> VulnerabilityReport:
        request = build_report_request(url, options)
        try:
            raw = await self.provider.generate(request.prompt, request.schema)
            report = parse_report(raw)
        except Exception as exc:
            logger.info("Report generation failed for %s via %s: %s", url, self.provider.name, exc)
            raise ReportGenerationError() from exc

        logger.info("Generated report for %s with %s findings", url, len(report.vulnerabilities))
        return report
