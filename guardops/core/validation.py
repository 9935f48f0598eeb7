from __future__ import annotations

import logging

from guardops.core.schema import AttendanceSummary, SalaryConfiguration

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class for payroll and compliance rule violations."""


class ConfigurationMissing(DomainError):
    """Raised when a salary configuration or attendance summary cannot be found."""


class InvalidPeriod(DomainError):
    """Raised when a period is malformed or has no attendance data at all."""


class WeightSumMismatch(DomainError):
    """Raised when category weights do not sum to 1 and the policy rejects it."""


class InvalidConfiguration(DomainError):
    """Raised when a salary configuration carries impossible values."""


class ConfigurationConflict(DomainError):
    """Raised when two salary configurations for one guard overlap in time."""


class PayrollStateError(DomainError):
    """Raised on an illegal payroll status transition or an unknown record."""


def check_attendance_consistency(summary: AttendanceSummary) -> list[str]:
    """Return human readable problems with ``summary`` without rejecting it.

    The calculator accepts inconsistent summaries and computes a result anyway;
    these warnings only surface the problem to whoever loaded the data.
    """

    problems: list[str] = []
    if summary.present_days + summary.absent_days > summary.total_days:
        problems.append(
            f"present_days + absent_days ({summary.present_days + summary.absent_days}) "
            f"exceeds total_days ({summary.total_days})"
        )
    for field in ("total_days", "present_days", "absent_days", "late_days"):
        if getattr(summary, field) < 0:
            problems.append(f"{field} is negative")
    for field in ("overtime_hours", "night_shift_hours", "weekend_hours", "holiday_hours"):
        if getattr(summary, field) < 0:
            problems.append(f"{field} is negative")

    for problem in problems:
        logger.warning("attendance summary %s/%s: %s", summary.guard_id, summary.period_month, problem)
    return problems


def validate_salary_config(config: SalaryConfiguration) -> None:
    if config.base_salary < 0:
        raise InvalidConfiguration(f"base salary for guard {config.guard_id} cannot be negative")
    if config.effective_to is not None and config.effective_to < config.effective_from:
        raise InvalidConfiguration(
            f"salary configuration for guard {config.guard_id} ends before it starts"
        )
