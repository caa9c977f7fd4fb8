from __future__ import annotations

from pathlib import Path

from cyberguard.models.reports import VulnerabilityReport


def export_json_report(report: VulnerabilityReport, output: str | None = None) -> str:
    payload = report.model_dump_json(indent=2, by_alias=True)
    if output:
        Path(output).write_text(payload, encoding="utf-8")
    return payload
