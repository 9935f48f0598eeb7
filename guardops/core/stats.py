from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from guardops.core.schema import PayrollRecord, PayrollStats


def summarize_records(records: Iterable[PayrollRecord]) -> PayrollStats:
    rows = list(records)
    total_payroll = sum((row.net_salary for row in rows), Decimal("0"))
    average = total_payroll / len(rows) if rows else Decimal("0")
    return PayrollStats(
        total_payroll=total_payroll,
        average_salary=average.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
        total_overtime_hours=sum((row.overtime_hours for row in rows), Decimal("0")),
        total_deductions=sum((row.deductions.total for row in rows), Decimal("0")),
        processed_count=sum(1 for row in rows if row.status in {"processed", "paid"}),
        pending_count=sum(1 for row in rows if row.status == "pending"),
        record_count=len(rows),
    )
