"""Application service layer for payroll runs."""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterable, Literal

from guardops.core.payroll import calculate_payroll
from guardops.core.periods import format_period, parse_period, period_start
from guardops.core.rules import PayrollRules
from guardops.core.schema import AttendanceSummary, PayrollRecord, PayrollStats, SalaryConfiguration
from guardops.core.stats import summarize_records
from guardops.core.validation import (
    ConfigurationMissing,
    InvalidPeriod,
    PayrollStateError,
    check_attendance_consistency,
    validate_salary_config,
)
from guardops.exporters.payroll_csv import export_payroll_csv
from guardops.exporters.payroll_xlsx import export_payroll_xlsx
from guardops.infrastructure import PayrollRepository

logger = logging.getLogger(__name__)

ExportFormat = Literal["csv", "xlsx"]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PayrollService:
    """Coordinates salary configuration lookup, calculation and the record lifecycle."""

    def __init__(
        self,
        repository: PayrollRepository,
        rules: PayrollRules | None = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._repository = repository
        self._rules = rules or PayrollRules()
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def rules(self) -> PayrollRules:
        return self._rules

    def configure(self, rules: PayrollRules) -> None:
        self._rules = rules

    def _timestamp(self) -> str:
        return self._clock().isoformat()

    # ------------------------------------------------------------------
    # input data
    # ------------------------------------------------------------------
    def add_salary_config(self, config: SalaryConfiguration) -> None:
        validate_salary_config(config)
        self._repository.add_salary_config(config)

    def list_salary_configs(self, guard_id: str | None = None) -> list[SalaryConfiguration]:
        return self._repository.list_salary_configs(guard_id)

    def add_attendance_summary(self, summary: AttendanceSummary) -> list[str]:
        """Store ``summary`` and return any consistency warnings it carries."""

        warnings = check_attendance_consistency(summary)
        self._repository.add_attendance_summary(summary)
        return warnings

    def list_attendance(self, period_month: str | None = None) -> list[AttendanceSummary]:
        return self._repository.list_attendance(period_month)

    # ------------------------------------------------------------------
    # calculation
    # ------------------------------------------------------------------
    def calculate(
        self,
        guard_id: str,
        month: int,
        year: int,
        *,
        advance_deductions: Decimal | None = None,
        other_deductions: Decimal | None = None,
    ) -> PayrollRecord:
        period_month = format_period(year, month)
        if not self._repository.list_attendance(period_month):
            raise InvalidPeriod(f"no attendance data recorded for {period_month}")

        config = self._repository.get_salary_config(guard_id, period_start(period_month))
        if config is None:
            raise ConfigurationMissing(f"no salary configuration effective for guard {guard_id} in {period_month}")
        attendance = self._repository.get_attendance_summary(guard_id, period_month)
        if attendance is None:
            raise ConfigurationMissing(f"no attendance summary for guard {guard_id} in {period_month}")

        return calculate_payroll(
            config,
            attendance,
            month=month,
            year=year,
            rules=self._rules,
            advance_deductions=advance_deductions,
            other_deductions=other_deductions,
        )

    def _guards_for_period(self, period_month: str) -> list[str]:
        on_date = period_start(period_month)
        guard_ids = {
            config.guard_id
            for config in self._repository.list_salary_configs()
            if config.is_effective(on_date)
        }
        return sorted(guard_ids)

    def process_period(self, month: int, year: int, guard_ids: Iterable[str] | None = None) -> list[PayrollRecord]:
        """Calculate and commit records for a period, replacing earlier runs.

        Every guard is calculated before anything is stored, so a missing
        configuration aborts the whole batch.
        """

        period_month = format_period(year, month)
        targets = list(guard_ids) if guard_ids else self._guards_for_period(period_month)
        if not targets:
            raise ConfigurationMissing(f"no salary configurations effective in {period_month}")

        processed_at = self._timestamp()
        records = [
            self.calculate(guard_id, month, year).model_copy(
                update={"status": "processed", "processed_at": processed_at}
            )
            for guard_id in targets
        ]

        with self._lock:
            for record in records:
                if self._repository.get_record(record.guard_id, record.period_month) is not None:
                    logger.info("replacing payroll record %s", record.record_id)
                self._repository.save_record(record)
        logger.info("processed payroll for %d guards in %s", len(records), period_month)
        return records

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def _require_record(self, guard_id: str, period_month: str) -> PayrollRecord:
        parse_period(period_month)
        record = self._repository.get_record(guard_id, period_month)
        if record is None:
            raise PayrollStateError(f"no payroll record for guard {guard_id} in {period_month}")
        return record

    def mark_paid(self, guard_id: str, period_month: str) -> PayrollRecord:
        with self._lock:
            record = self._require_record(guard_id, period_month)
            if record.status != "processed":
                raise PayrollStateError(f"payroll record {record.record_id} is {record.status}, only processed records can be paid")
            updated = record.model_copy(update={"status": "paid", "paid_at": self._timestamp()})
            self._repository.save_record(updated)
        logger.info("payroll record %s marked paid", updated.record_id)
        return updated

    def cancel(self, guard_id: str, period_month: str, *, notes: str | None = None) -> PayrollRecord:
        with self._lock:
            record = self._require_record(guard_id, period_month)
            if record.status == "cancelled":
                raise PayrollStateError(f"payroll record {record.record_id} is already cancelled")
            update: dict[str, object] = {"status": "cancelled", "cancelled_at": self._timestamp()}
            if notes:
                update["notes"] = notes
            updated = record.model_copy(update=update)
            self._repository.save_record(updated)
        logger.info("payroll record %s cancelled (was %s)", updated.record_id, record.status)
        return updated

    # ------------------------------------------------------------------
    # reporting
    # ------------------------------------------------------------------
    def list_records(
        self,
        period_month: str | None = None,
        *,
        guard_id: str | None = None,
        status: str | None = None,
    ) -> list[PayrollRecord]:
        if period_month is not None:
            parse_period(period_month)
        return self._repository.list_records(period_month, guard_id=guard_id, status=status)

    def get_stats(self, period_month: str | None = None, *, guard_id: str | None = None) -> PayrollStats:
        return summarize_records(self.list_records(period_month, guard_id=guard_id))

    def export(self, path: Path, fmt: ExportFormat = "csv", period_month: str | None = None) -> Path:
        rows = self.list_records(period_month)
        if fmt == "xlsx":
            return export_payroll_xlsx(path, rows)
        return export_payroll_csv(path, rows)

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._repository.reset()
