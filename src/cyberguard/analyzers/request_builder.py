from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cyberguard.models.findings import Severity, Standard
from cyberguard.models.targets import ScanOptions

OWASP_STANDARD_NAME = "OWASP Top 10 2021"
ISO_STANDARD_NAME = "relevant controls from ISO/IEC 27001:2022"

PROMPT_TEMPLATE = """
Act as a senior penetration tester and cybersecurity analyst.
Your task is to perform a simulated vulnerability assessment of the web application at the URL: {url}.
Generate a detailed and realistic vulnerability report based on the following standards: {standards}.
The report should be comprehensive, professional, and provide actionable insights.

Do not mention that this is a simulation. Present the findings as if a real scan was performed.

Invent a plausible set of findings. Ensure the number of vulnerabilities is realistic, between 5 and 10 findings.
Vary the severity of the findings (e.g., a mix of Critical, High, Medium, and Low).
For each vulnerability, provide a clear description, its potential impact, and specific, actionable remediation advice.
The executive summary should be concise and suitable for management.

Return the entire report in a single JSON object that conforms to the provided schema.
""".strip()

VULNERABILITY_FIELDS = ["id", "title", "severity", "description", "impact", "remediation", "standard"]

REPORT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "executiveSummary": {
            "type": "string",
            "description": (
                "A high-level summary of the findings, written for a non-technical audience like "
                "executives. It should state the overall security posture and key risks."
            ),
        },
        "vulnerabilities": {
            "type": "array",
            "description": "A detailed list of all vulnerabilities found.",
            "items": {
                "type": "object",
                "properties": {
                    "id": {
                        "type": "string",
                        "description": (
                            "A unique identifier for the vulnerability, e.g., 'A01:2021' for OWASP "
                            "or a relevant ISO control number."
                        ),
                    },
                    "title": {
                        "type": "string",
                        "description": "A concise, descriptive title for the vulnerability.",
                    },
                    "severity": {
                        "type": "string",
                        "enum": [item.value for item in Severity],
                        "description": "The severity level of the vulnerability.",
                    },
                    "description": {
                        "type": "string",
                        "description": (
                            "A detailed explanation of the vulnerability, including what it is and "
                            "how it was discovered."
                        ),
                    },
                    "impact": {
                        "type": "string",
                        "description": "The potential business impact if this vulnerability is exploited.",
                    },
                    "remediation": {
                        "type": "string",
                        "description": "Clear, actionable steps to fix the vulnerability.",
                    },
                    "standard": {
                        "type": "string",
                        "enum": [item.value for item in Standard],
                        "description": "The security standard this vulnerability relates to.",
                    },
                },
                "required": VULNERABILITY_FIELDS,
            },
        },
    },
    "required": ["executiveSummary", "vulnerabilities"],
}


@dataclass(frozen=True)
class ReportRequest:
    prompt: str
    schema: dict[str, Any]


def describe_standards(options: ScanOptions) -> list[str]:
    standards: list[str] = []
    if options.owasp_top10:
        standards.append(OWASP_STANDARD_NAME)
    if options.iso27001:
        standards.append(ISO_STANDARD_NAME)
    return standards


def build_report_request(url: str, options: ScanOptions) -> ReportRequest:
    """Compose the generation prompt and its structured-output schema.

    ``url`` is expected to be validated already and ``options`` to select at
    least one standard; no network call happens here.
    """
    prompt = PROMPT_TEMPLATE.format(url=url, standards=", ".join(describe_standards(options)))
    return ReportRequest(prompt=prompt, schema=REPORT_SCHEMA)
