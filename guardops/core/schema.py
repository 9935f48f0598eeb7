from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, constr

PayrollStatus = Literal["pending", "processed", "paid", "cancelled"]
ItemStatus = Literal["compliant", "partial", "non-compliant", "not-applicable"]
CategoryTrend = Literal["up", "down", "stable"]
OverallTrend = Literal["improving", "declining", "stable"]

Period = constr(pattern=r"^\d{4}-\d{2}$")


class SalaryConfiguration(BaseModel):
    guard_id: str
    guard_name: str | None = None
    base_salary: Decimal
    hourly_rate: Decimal | None = None
    overtime_multiplier: Decimal = Decimal("1.5")
    night_shift_allowance: Decimal = Decimal("0")
    weekend_allowance: Decimal = Decimal("0")
    holiday_allowance: Decimal = Decimal("0")
    advance_deductions: Decimal | None = None
    other_deductions: Decimal | None = None
    effective_from: date
    effective_to: date | None = None

    def is_effective(self, on_date: date) -> bool:
        if on_date < self.effective_from:
            return False
        return self.effective_to is None or on_date <= self.effective_to

    def overlaps(self, other: "SalaryConfiguration") -> bool:
        if self.guard_id != other.guard_id:
            return False
        self_end = self.effective_to or date.max
        other_end = other.effective_to or date.max
        return self.effective_from <= other_end and other.effective_from <= self_end


class AttendanceSummary(BaseModel):
    guard_id: str
    guard_name: str | None = None
    period_month: Period
    total_days: int = 0
    present_days: int = 0
    absent_days: int = 0
    late_days: int = 0
    overtime_hours: Decimal = Decimal("0")
    night_shift_hours: Decimal = Decimal("0")
    weekend_hours: Decimal = Decimal("0")
    holiday_hours: Decimal = Decimal("0")


class PayrollDeductions(BaseModel):
    absent_days: int = 0
    late_days: int = 0
    absent_deduction: Decimal = Decimal("0")
    penalty_amount: Decimal = Decimal("0")
    advance_deductions: Decimal = Decimal("0")
    other_deductions: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


class PayrollRecord(BaseModel):
    record_id: str
    guard_id: str
    guard_name: str | None = None
    period_month: Period
    year: int
    base_salary: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    overtime_amount: Decimal = Decimal("0")
    night_shift_hours: Decimal = Decimal("0")
    night_shift_amount: Decimal = Decimal("0")
    weekend_hours: Decimal = Decimal("0")
    weekend_amount: Decimal = Decimal("0")
    holiday_hours: Decimal = Decimal("0")
    holiday_amount: Decimal = Decimal("0")
    total_earnings: Decimal = Decimal("0")
    deductions: PayrollDeductions = Field(default_factory=PayrollDeductions)
    net_salary: Decimal = Decimal("0")
    status: PayrollStatus = "pending"
    processed_at: str | None = None
    paid_at: str | None = None
    cancelled_at: str | None = None
    notes: str | None = None
    rule_version: str = "rules_v1"


class PayrollStats(BaseModel):
    total_payroll: Decimal = Decimal("0")
    average_salary: Decimal = Decimal("0")
    total_overtime_hours: Decimal = Decimal("0")
    total_deductions: Decimal = Decimal("0")
    processed_count: int = 0
    pending_count: int = 0
    record_count: int = 0


class ComplianceItem(BaseModel):
    id: str
    name: str
    status: ItemStatus
    score: float
    max_score: float
    due_date: str | None = None
    last_updated: str | None = None
    details: str | None = None
    action_required: str | None = None


class ComplianceCategory(BaseModel):
    id: str
    name: str
    description: str | None = None
    score: float
    max_score: float = 100
    weight: float
    items: list[ComplianceItem] = Field(default_factory=list)
    trend: CategoryTrend = "stable"


class ComplianceHistoryEntry(BaseModel):
    date: str
    score: int
    category_scores: dict[str, float] = Field(default_factory=dict)


class ComplianceScore(BaseModel):
    overall: int
    categories: list[ComplianceCategory] = Field(default_factory=list)
    last_updated: str | None = None
    trend: OverallTrend = "stable"
    level: str = "Poor"
    recommendations: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
