from __future__ import annotations

import asyncio

import httpx
import pytest

from cyberguard.analyzers.report_generator import GENERATION_FAILED_MESSAGE, ReportGenerator
from cyberguard.controller import (
    EMPTY_URL_MESSAGE,
    INVALID_URL_MESSAGE,
    NO_STANDARD_MESSAGE,
    InvalidTransitionError,
    ScanController,
    ScanState,
    is_valid_url,
)
from cyberguard.models.findings import Severity
from cyberguard.models.reports import VulnerabilityReport
from cyberguard.models.targets import ScanOptions
from cyberguard.output.summary import severity_counts

from conftest import StubProvider, make_payload


class _RecordingGenerator:
    def __init__(self, result: VulnerabilityReport | Exception) -> None:
        self.result = result
        self.calls: list[tuple[str, ScanOptions]] = []

    async def generate_report(self, url: str, options: ScanOptions) -> VulnerabilityReport:
        self.calls.append((url, options))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _report() -> VulnerabilityReport:
    return VulnerabilityReport.model_validate(make_payload())


def _assert_idle_and_clear(controller: ScanController) -> None:
    assert controller.state is ScanState.IDLE
    assert controller.report is None
    assert controller.error is None
    assert controller.target is None


@pytest.mark.parametrize(
    ("url", "message"),
    [
        ("", EMPTY_URL_MESSAGE),
        ("   ", EMPTY_URL_MESSAGE),
        ("not a url", INVALID_URL_MESSAGE),
        ("example.com", INVALID_URL_MESSAGE),
        ("https://", INVALID_URL_MESSAGE),
        ("ftp://example.com", INVALID_URL_MESSAGE),
    ],
)
def test_invalid_urls_are_rejected_without_calling_generator(url: str, message: str) -> None:
    generator = _RecordingGenerator(_report())
    controller = ScanController(generator)

    accepted = asyncio.run(controller.submit(url, ScanOptions()))

    assert accepted is False
    assert controller.validation_message == message
    assert generator.calls == []
    _assert_idle_and_clear(controller)


def test_no_standard_selected_is_rejected() -> None:
    generator = _RecordingGenerator(_report())
    controller = ScanController(generator)

    accepted = asyncio.run(
        controller.submit("https://example.com", ScanOptions(owasp_top10=False, iso27001=False))
    )

    assert accepted is False
    assert controller.validation_message == NO_STANDARD_MESSAGE
    assert generator.calls == []
    _assert_idle_and_clear(controller)


def test_is_valid_url_accepts_http_and_https() -> None:
    assert is_valid_url("https://example.com")
    assert is_valid_url("http://localhost:8080/app?q=1")
    assert not is_valid_url("mailto:security@example.com")


def test_successful_scan_completes_with_report() -> None:
    generator = _RecordingGenerator(_report())
    controller = ScanController(generator)

    accepted = asyncio.run(controller.submit("  https://example.com  ", ScanOptions()))

    assert accepted is True
    assert controller.state is ScanState.COMPLETED
    assert controller.report is not None
    assert controller.error is None
    assert controller.target is not None
    assert controller.target.url == "https://example.com"
    assert generator.calls == [("https://example.com", ScanOptions())]


def test_owasp_only_scan_end_to_end() -> None:
    provider = StubProvider(VulnerabilityReport.model_validate(make_payload()).model_dump_json(by_alias=True))
    controller = ScanController(ReportGenerator(provider))

    asyncio.run(controller.submit("https://example.com", ScanOptions(owasp_top10=True, iso27001=False)))

    assert len(provider.calls) == 1
    prompt, _schema = provider.calls[0]
    assert "OWASP Top 10 2021" in prompt
    assert "ISO/IEC 27001" not in prompt
    assert controller.report is not None
    assert severity_counts(controller.report) == {
        Severity.CRITICAL: 1,
        Severity.HIGH: 2,
        Severity.MEDIUM: 1,
        Severity.LOW: 1,
        Severity.INFORMATIONAL: 1,
    }


def test_generator_failure_sets_generic_error() -> None:
    generator = _RecordingGenerator(httpx.ConnectError("getaddrinfo failed for api host"))
    controller = ScanController(generator)

    accepted = asyncio.run(controller.submit("https://example.com", ScanOptions()))

    assert accepted is True
    assert controller.state is ScanState.ERROR
    assert controller.error == GENERATION_FAILED_MESSAGE
    assert "getaddrinfo" not in controller.error
    assert controller.report is None


def test_reset_from_completed_returns_to_clean_idle() -> None:
    controller = ScanController(_RecordingGenerator(_report()))
    asyncio.run(controller.submit("https://example.com", ScanOptions()))

    controller.reset()

    _assert_idle_and_clear(controller)
    assert controller.validation_message is None


def test_reset_from_error_returns_to_clean_idle() -> None:
    controller = ScanController(_RecordingGenerator(RuntimeError("boom")))
    asyncio.run(controller.submit("https://example.com", ScanOptions()))
    assert controller.state is ScanState.ERROR

    controller.reset()

    _assert_idle_and_clear(controller)


def test_reset_in_idle_clears_validation_message() -> None:
    controller = ScanController(_RecordingGenerator(_report()))
    asyncio.run(controller.submit("", ScanOptions()))

    controller.reset()

    assert controller.validation_message is None
    _assert_idle_and_clear(controller)


def test_submit_outside_idle_is_refused() -> None:
    generator = _RecordingGenerator(_report())
    controller = ScanController(generator)
    asyncio.run(controller.submit("https://example.com", ScanOptions()))

    with pytest.raises(InvalidTransitionError):
        asyncio.run(controller.submit("https://other.test", ScanOptions()))

    assert len(generator.calls) == 1
    assert controller.state is ScanState.COMPLETED


def test_submit_while_scanning_is_refused() -> None:
    async def _scenario() -> None:
        release = asyncio.Event()

        class _SlowGenerator:
            async def generate_report(self, url: str, options: ScanOptions) -> VulnerabilityReport:
                await release.wait()
                return _report()

        controller = ScanController(_SlowGenerator())
        first = asyncio.create_task(controller.submit("https://example.com", ScanOptions()))
        await asyncio.sleep(0)
        assert controller.state is ScanState.SCANNING

        with pytest.raises(InvalidTransitionError):
            await controller.submit("https://example.com", ScanOptions())
        with pytest.raises(InvalidTransitionError):
            controller.reset()

        release.set()
        await first
        assert controller.state is ScanState.COMPLETED

    asyncio.run(_scenario())


def test_new_scan_replaces_previous_report() -> None:
    generator = _RecordingGenerator(_report())
    controller = ScanController(generator)
    asyncio.run(controller.submit("https://first.test", ScanOptions()))
    controller.reset()

    generator.result = VulnerabilityReport.model_validate(make_payload(["Low"]))
    asyncio.run(controller.submit("https://second.test", ScanOptions(iso27001=True)))

    assert controller.target is not None
    assert controller.target.url == "https://second.test"
    assert controller.report is not None
    assert len(controller.report.vulnerabilities) == 1
