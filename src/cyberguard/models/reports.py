from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cyberguard.models.findings import Vulnerability


class VulnerabilityReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    executive_summary: str = Field(alias="executiveSummary")
    vulnerabilities: list[Vulnerability]

    @field_validator("executive_summary")
    @classmethod
    def _summary_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("executiveSummary must not be empty")
        return value
