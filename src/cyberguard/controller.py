from __future__ import annotations

import logging
from enum import StrEnum
from typing import Protocol

import httpx

from cyberguard.analyzers.report_generator import GENERATION_FAILED_MESSAGE
from cyberguard.models.reports import VulnerabilityReport
from cyberguard.models.targets import ScanOptions, ScanTarget

EMPTY_URL_MESSAGE = "Target URL cannot be empty."
INVALID_URL_MESSAGE = "Please enter a valid URL (e.g., https://example.com)."
NO_STANDARD_MESSAGE = "Please select at least one assessment standard."

logger = logging.getLogger(__name__)


class ScanState(StrEnum):
    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETED = "completed"
    ERROR = "error"


TRANSITIONS: dict[ScanState, frozenset[ScanState]] = {
    ScanState.IDLE: frozenset({ScanState.SCANNING}),
    ScanState.SCANNING: frozenset({ScanState.COMPLETED, ScanState.ERROR}),
    ScanState.COMPLETED: frozenset({ScanState.IDLE}),
    ScanState.ERROR: frozenset({ScanState.IDLE}),
}


class InvalidTransitionError(RuntimeError):
    pass


class ReportSource(Protocol):
    async def generate_report(self, url: str, options: ScanOptions) -> VulnerabilityReport: ...


def is_valid_url(value: str) -> bool:
    try:
        parsed = httpx.URL(value)
    except (httpx.InvalidURL, TypeError, ValueError):
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.host)


class ScanController:
    """Owns the scan lifecycle: idle -> scanning -> completed | error -> idle."""

    def __init__(self, generator: ReportSource) -> None:
        self.generator = generator
        self.state = ScanState.IDLE
        self.report: VulnerabilityReport | None = None
        self.error: str | None = None
        self.target: ScanTarget | None = None
        self.validation_message: str | None = None

    def validate(self, url: str, options: ScanOptions) -> str | None:
        candidate = url.strip()
        if not candidate:
            return EMPTY_URL_MESSAGE
        if not is_valid_url(candidate):
            return INVALID_URL_MESSAGE
        if not options.any_selected:
            return NO_STANDARD_MESSAGE
        return None

    async def submit(self, url: str, options: ScanOptions) -> bool:
        """Start a scan. Returns ``False`` when the input was rejected."""
        if self.state is not ScanState.IDLE:
            raise InvalidTransitionError(f"Cannot start a scan while {self.state.value}")

        message = self.validate(url, options)
        if message is not None:
            self.validation_message = message
            return False

        self.validation_message = None
        self.report = None
        self.error = None
        self.target = ScanTarget(url=url.strip(), options=options)
        self._transition(ScanState.SCANNING)

        try:
            report = await self.generator.generate_report(self.target.url, options)
        except Exception:
            logger.debug("Scan failed for %s", self.target.url, exc_info=True)
            self.error = GENERATION_FAILED_MESSAGE
            self._transition(ScanState.ERROR)
            return True

        self.report = report
        self._transition(ScanState.COMPLETED)
        return True

    def reset(self) -> None:
        if self.state is ScanState.SCANNING:
            raise InvalidTransitionError("Cannot reset while a scan is in progress")
        if self.state is not ScanState.IDLE:
            self._transition(ScanState.IDLE)
        self.report = None
        self.error = None
        self.target = None
        self.validation_message = None

    def _transition(self, new_state: ScanState) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise InvalidTransitionError(f"Invalid transition {self.state.value} -> {new_state.value}")
        logger.info("Scan state %s -> %s", self.state.value, new_state.value)
        self.state = new_state
