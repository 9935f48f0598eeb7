"""In-memory state holders for the payroll and compliance repositories."""
from __future__ import annotations

from dataclasses import dataclass, field

from guardops.core.schema import (
    AttendanceSummary,
    ComplianceCategory,
    ComplianceHistoryEntry,
    PayrollRecord,
    SalaryConfiguration,
)


@dataclass(slots=True)
class PayrollState:
    """Salary configurations, attendance summaries and computed records.

    Attendance summaries and payroll records are keyed by ``(guard_id, period_month)``.
    """

    salary_configs: dict[str, list[SalaryConfiguration]] = field(default_factory=dict)
    attendance: dict[tuple[str, str], AttendanceSummary] = field(default_factory=dict)
    records: dict[tuple[str, str], PayrollRecord] = field(default_factory=dict)


@dataclass(slots=True)
class ComplianceState:
    categories: list[ComplianceCategory] = field(default_factory=list)
    history: list[ComplianceHistoryEntry] = field(default_factory=list)
    last_updated: str | None = None
