from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest

from cyberguard.analyzers.report_generator import (
    GENERATION_FAILED_MESSAGE,
    ReportGenerationError,
    ReportGenerator,
    parse_report,
)
from cyberguard.models.findings import Severity
from cyberguard.models.targets import ScanOptions

from conftest import StubProvider


def test_generate_report_returns_typed_report(stub_provider) -> None:
    generator = ReportGenerator(stub_provider)

    report = asyncio.run(generator.generate_report("https://example.com", ScanOptions()))

    assert len(stub_provider.calls) == 1
    prompt, schema = stub_provider.calls[0]
    assert "https://example.com" in prompt
    assert schema["required"] == ["executiveSummary", "vulnerabilities"]
    assert len(report.vulnerabilities) == 6
    assert report.vulnerabilities[0].severity is Severity.CRITICAL


def test_generate_report_tolerates_surrounding_whitespace(report_payload) -> None:
    provider = StubProvider(f"\n  {json.dumps(report_payload)}  \n")
    report = asyncio.run(ReportGenerator(provider).generate_report("https://example.com", ScanOptions()))
    assert report.executive_summary


@pytest.mark.parametrize(
    "response",
    [
        "not json at all",
        "[]",
        json.dumps({"vulnerabilities": []}),
        json.dumps({"executiveSummary": "", "vulnerabilities": []}),
        json.dumps({"executiveSummary": "Summary", "vulnerabilities": "n/a"}),
        json.dumps({"executiveSummary": "Summary", "vulnerabilities": [{"id": "A01"}]}),
    ],
)
def test_generate_report_rejects_invalid_responses(response) -> None:
    generator = ReportGenerator(StubProvider(response))

    with pytest.raises(ReportGenerationError) as exc_info:
        asyncio.run(generator.generate_report("https://example.com", ScanOptions()))

    assert str(exc_info.value) == GENERATION_FAILED_MESSAGE


def test_transport_failure_is_collapsed_into_generic_error() -> None:
    provider = StubProvider(httpx.ConnectError("connection refused by upstream"))
    generator = ReportGenerator(provider)

    with pytest.raises(ReportGenerationError) as exc_info:
        asyncio.run(generator.generate_report("https://example.com", ScanOptions()))

    assert str(exc_info.value) == GENERATION_FAILED_MESSAGE
    assert "connection refused" not in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert len(provider.calls) == 1


def test_failure_cause_is_logged(caplog) -> None:
    caplog.set_level(logging.INFO, logger="cyberguard.analyzers.report_generator")
    generator = ReportGenerator(StubProvider(ValueError("quota exhausted for project")))

    with pytest.raises(ReportGenerationError):
        asyncio.run(generator.generate_report("https://example.com", ScanOptions()))

    assert "quota exhausted for project" in caplog.text


def test_parse_report_roundtrips_payload(report_payload) -> None:
    report = parse_report(json.dumps(report_payload))
    assert report.model_dump(by_alias=True, mode="json") == report_payload
