from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class Severity(StrEnum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    INFORMATIONAL = "Informational"


class Standard(StrEnum):
    OWASP_TOP_10 = "OWASP Top 10"
    ISO_27001 = "ISO 27001"
    GENERAL = "General"


# Display grouping only; severities are never compared numerically.
SEVERITY_DISPLAY_ORDER: tuple[Severity, ...] = tuple(Severity)


class Vulnerability(BaseModel):
    id: str
    title: str
    severity: Severity
    description: str
    impact: str
    remediation: str
    standard: Standard
