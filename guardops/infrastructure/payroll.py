"""Infrastructure layer for payroll persistence."""
from __future__ import annotations

from datetime import date
from typing import Protocol

from guardops.core.schema import AttendanceSummary, PayrollRecord, SalaryConfiguration
from guardops.core.validation import ConfigurationConflict
from guardops.domain import PayrollState


class PayrollRepository(Protocol):
    """Persistence contract for salary configurations, attendance and payroll records."""

    def add_salary_config(self, config: SalaryConfiguration) -> None: ...

    def list_salary_configs(self, guard_id: str | None = None) -> list[SalaryConfiguration]: ...

    def get_salary_config(self, guard_id: str, on_date: date) -> SalaryConfiguration | None: ...

    def add_attendance_summary(self, summary: AttendanceSummary) -> None: ...

    def get_attendance_summary(self, guard_id: str, period_month: str) -> AttendanceSummary | None: ...

    def list_attendance(self, period_month: str | None = None) -> list[AttendanceSummary]: ...

    def save_record(self, record: PayrollRecord) -> None: ...

    def get_record(self, guard_id: str, period_month: str) -> PayrollRecord | None: ...

    def list_records(
        self,
        period_month: str | None = None,
        *,
        guard_id: str | None = None,
        status: str | None = None,
    ) -> list[PayrollRecord]: ...

    def reset(self) -> None: ...


class InMemoryPayrollRepository:
    """Simple in-memory repository for fast iteration and tests."""

    def __init__(self) -> None:
        self._state = PayrollState()

    # ------------------------------------------------------------------
    # salary configurations
    # ------------------------------------------------------------------
    def add_salary_config(self, config: SalaryConfiguration) -> None:
        existing = self._state.salary_configs.setdefault(config.guard_id, [])
        for current in existing:
            if current.overlaps(config):
                raise ConfigurationConflict(
                    f"salary configuration for guard {config.guard_id} starting {config.effective_from} "
                    f"overlaps the one starting {current.effective_from}"
                )
        existing.append(config)
        existing.sort(key=lambda item: item.effective_from)

    def list_salary_configs(self, guard_id: str | None = None) -> list[SalaryConfiguration]:
        if guard_id is not None:
            return list(self._state.salary_configs.get(guard_id, []))
        configs: list[SalaryConfiguration] = []
        for items in self._state.salary_configs.values():
            configs.extend(items)
        return configs

    def get_salary_config(self, guard_id: str, on_date: date) -> SalaryConfiguration | None:
        for config in self._state.salary_configs.get(guard_id, []):
            if config.is_effective(on_date):
                return config
        return None

    # ------------------------------------------------------------------
    # attendance summaries
    # ------------------------------------------------------------------
    def add_attendance_summary(self, summary: AttendanceSummary) -> None:
        self._state.attendance[(summary.guard_id, summary.period_month)] = summary

    def get_attendance_summary(self, guard_id: str, period_month: str) -> AttendanceSummary | None:
        return self._state.attendance.get((guard_id, period_month))

    def list_attendance(self, period_month: str | None = None) -> list[AttendanceSummary]:
        return [
            summary
            for (_, period), summary in self._state.attendance.items()
            if period_month is None or period == period_month
        ]

    # ------------------------------------------------------------------
    # payroll records
    # ------------------------------------------------------------------
    def save_record(self, record: PayrollRecord) -> None:
        self._state.records[(record.guard_id, record.period_month)] = record

    def get_record(self, guard_id: str, period_month: str) -> PayrollRecord | None:
        return self._state.records.get((guard_id, period_month))

    def list_records(
        self,
        period_month: str | None = None,
        *,
        guard_id: str | None = None,
        status: str | None = None,
    ) -> list[PayrollRecord]:
        rows = [
            record
            for record in self._state.records.values()
            if (period_month is None or record.period_month == period_month)
            and (guard_id is None or record.guard_id == guard_id)
            and (status is None or record.status == status)
        ]
        rows.sort(key=lambda item: (item.period_month, item.guard_id))
        return rows

    def reset(self) -> None:
        self._state = PayrollState()
