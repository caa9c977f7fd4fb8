"""Domain models."""

from cyberguard.models.findings import SEVERITY_DISPLAY_ORDER, Severity, Standard, Vulnerability
from cyberguard.models.reports import VulnerabilityReport
from cyberguard.models.targets import ScanOptions, ScanTarget

__all__ = [
    "SEVERITY_DISPLAY_ORDER",
    "ScanOptions",
    "ScanTarget",
    "Severity",
    "Standard",
    "Vulnerability",
    "VulnerabilityReport",
]
