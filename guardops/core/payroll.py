from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from guardops.core.periods import format_period
from guardops.core.rules import PayrollRules
from guardops.core.schema import (
    AttendanceSummary,
    PayrollDeductions,
    PayrollRecord,
    SalaryConfiguration,
)
from guardops.core.validation import ConfigurationMissing, InvalidPeriod

DEFAULT_RULES = PayrollRules()


@dataclass
class EarningsBreakdown:
    overtime: Decimal = Decimal("0")
    night_shift: Decimal = Decimal("0")
    weekend: Decimal = Decimal("0")
    holiday: Decimal = Decimal("0")


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def record_id_for(guard_id: str, period_month: str) -> str:
    return f"payroll-{guard_id}-{period_month}"


def daily_rate(config: SalaryConfiguration, rules: PayrollRules = DEFAULT_RULES) -> Decimal:
    """Base salary spread over the fixed working-day divisor (unrounded)."""

    return config.base_salary / rules.working_days_divisor


def hourly_basis(config: SalaryConfiguration, rules: PayrollRules = DEFAULT_RULES) -> Decimal:
    if config.hourly_rate:
        return config.hourly_rate
    return daily_rate(config, rules) / rules.shift_hours


def _per_hour(allowance: Decimal, rules: PayrollRules) -> Decimal:
    # allowances are quoted per shift
    return allowance / rules.shift_hours


def compute_earnings(
    config: SalaryConfiguration,
    attendance: AttendanceSummary,
    rules: PayrollRules = DEFAULT_RULES,
) -> EarningsBreakdown:
    return EarningsBreakdown(
        overtime=attendance.overtime_hours * hourly_basis(config, rules) * config.overtime_multiplier,
        night_shift=attendance.night_shift_hours * _per_hour(config.night_shift_allowance, rules),
        weekend=attendance.weekend_hours * _per_hour(config.weekend_allowance, rules),
        holiday=attendance.holiday_hours * _per_hour(config.holiday_allowance, rules),
    )


def compute_deductions(
    config: SalaryConfiguration,
    attendance: AttendanceSummary,
    rules: PayrollRules = DEFAULT_RULES,
    *,
    advance_deductions: Decimal | None = None,
    other_deductions: Decimal | None = None,
) -> PayrollDeductions:
    advance = advance_deductions
    if advance is None:
        advance = config.advance_deductions if config.advance_deductions is not None else rules.advance_deductions
    other = other_deductions
    if other is None:
        other = config.other_deductions if config.other_deductions is not None else rules.other_deductions

    absent = _quantize(Decimal(attendance.absent_days) * daily_rate(config, rules))
    penalty = _quantize(Decimal(attendance.late_days) * rules.late_penalty_per_day)
    advance = _quantize(Decimal(advance))
    other = _quantize(Decimal(other))
    return PayrollDeductions(
        absent_days=attendance.absent_days,
        late_days=attendance.late_days,
        absent_deduction=absent,
        penalty_amount=penalty,
        advance_deductions=advance,
        other_deductions=other,
        total=absent + penalty + advance + other,
    )


def calculate_payroll(
    config: SalaryConfiguration | None,
    attendance: AttendanceSummary | None,
    *,
    month: int,
    year: int,
    rules: PayrollRules = DEFAULT_RULES,
    advance_deductions: Decimal | None = None,
    other_deductions: Decimal | None = None,
) -> PayrollRecord:
    """Derive a pending payroll record for one guard and one month.

    Amounts are quantized to two decimals component by component and the net
    salary is taken from the quantized totals, so ``net_salary`` always equals
    ``total_earnings - deductions.total`` exactly.
    """

    period_month = format_period(year, month)
    if config is None:
        raise ConfigurationMissing("salary configuration not found")
    if attendance is None:
        raise ConfigurationMissing(f"attendance summary not found for guard {config.guard_id} in {period_month}")
    if config.guard_id != attendance.guard_id:
        raise ConfigurationMissing(
            f"salary configuration for {config.guard_id} does not match attendance of {attendance.guard_id}"
        )
    if attendance.period_month != period_month:
        raise InvalidPeriod(f"attendance summary covers {attendance.period_month}, not {period_month}")

    earnings = compute_earnings(config, attendance, rules)
    base = _quantize(config.base_salary)
    overtime = _quantize(earnings.overtime)
    night_shift = _quantize(earnings.night_shift)
    weekend = _quantize(earnings.weekend)
    holiday = _quantize(earnings.holiday)
    total_earnings = base + overtime + night_shift + weekend + holiday

    deductions = compute_deductions(
        config,
        attendance,
        rules,
        advance_deductions=advance_deductions,
        other_deductions=other_deductions,
    )

    return PayrollRecord(
        record_id=record_id_for(config.guard_id, period_month),
        guard_id=config.guard_id,
        guard_name=attendance.guard_name or config.guard_name,
        period_month=period_month,
        year=int(year),
        base_salary=base,
        overtime_hours=attendance.overtime_hours,
        overtime_amount=overtime,
        night_shift_hours=attendance.night_shift_hours,
        night_shift_amount=night_shift,
        weekend_hours=attendance.weekend_hours,
        weekend_amount=weekend,
        holiday_hours=attendance.holiday_hours,
        holiday_amount=holiday,
        total_earnings=total_earnings,
        deductions=deductions,
        net_salary=total_earnings - deductions.total,
        status="pending",
        rule_version=rules.rule_version,
    )
