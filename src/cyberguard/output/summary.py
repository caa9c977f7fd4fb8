from __future__ import annotations

from collections import Counter

from rich.console import Console

from cyberguard.models.findings import SEVERITY_DISPLAY_ORDER, Severity
from cyberguard.models.reports import VulnerabilityReport


def severity_counts(report: VulnerabilityReport) -> dict[Severity, int]:
    """Tally findings per severity, zero-filled, in display order."""
    counts = Counter(item.severity for item in report.vulnerabilities)
    return {severity: counts.get(severity, 0) for severity in SEVERITY_DISPLAY_ORDER}


def format_summary_report(report: VulnerabilityReport, target_url: str) -> str:
    lines: list[str] = []
    lines.append("CyberGuard Scan Summary")
    lines.append(f"Target: {target_url}")
    lines.append(
        "Findings: "
        + ", ".join(f"{severity.value}={count}" for severity, count in severity_counts(report).items())
    )
    lines.append("")
    lines.append("Executive summary:")
    lines.append(report.executive_summary)

    if not report.vulnerabilities:
        lines.append("")
        lines.append("Vulnerabilities: none")
        return "\n".join(lines)

    lines.append("")
    lines.append("Vulnerabilities:")
    for index, vuln in enumerate(report.vulnerabilities, start=1):
        lines.append(f"{index}. [{vuln.severity.value.upper()}] {vuln.id}: {vuln.title} ({vuln.standard.value})")
        lines.append(f"   Remediation: {vuln.remediation}")

    return "\n".join(lines)


def render_summary_report(report: VulnerabilityReport, target_url: str, *, no_color: bool = False) -> str:
    payload = format_summary_report(report, target_url)
    Console(no_color=no_color).print(payload, markup=False, highlight=False)
    return payload
