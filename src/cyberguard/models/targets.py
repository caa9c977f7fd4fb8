from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ScanOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    owasp_top10: bool = Field(default=True, alias="owaspTop10")
    iso27001: bool = False

    @property
    def any_selected(self) -> bool:
        return self.owasp_top10 or self.iso27001


class ScanTarget(BaseModel):
    url: str
    options: ScanOptions
