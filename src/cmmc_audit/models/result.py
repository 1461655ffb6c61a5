"""Control check result data models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ControlStatus(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"


class ControlCheckResult(BaseModel):
    """Outcome of one control check. Field order is the report column order."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    control_family: str = Field(alias="controlFamily")
    control_id: str = Field(alias="controlID")
    description: str
    current_setting: str = Field(alias="currentSetting")
    compliant_setting: str = Field(alias="compliantSetting")
    status: ControlStatus

    @property
    def passed(self) -> bool:
        return self.status == ControlStatus.PASS


RESULT_FIELDS: list[str] = [
    field.alias or name for name, field in ControlCheckResult.model_fields.items()
]


class AuditSummary(BaseModel):
    passed: int = 0
    failed: int = 0
    total: int = 0

    @classmethod
    def from_results(cls, results) -> "AuditSummary":
        passed = sum(1 for r in results if r.passed)
        total = len(results)
        return cls(passed=passed, failed=total - passed, total=total)


class AuditReport(BaseModel):
    """Everything a renderer needs: run metadata plus the ordered results."""

    model_config = ConfigDict(frozen=True)

    title: str
    hostname: str = ""
    generated_at: datetime
    tool_version: str = ""
    results: tuple[ControlCheckResult, ...] = ()

    @property
    def summary(self) -> AuditSummary:
        return AuditSummary.from_results(self.results)

