from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from guardops.core.schema import PayrollRecord


def register_rows(rows: Iterable[PayrollRecord]) -> list[dict]:
    """Flatten payroll records into one register line per guard and period."""

    records = []
    for row in rows:
        data = row.model_dump()
        deductions = data.pop("deductions")
        data["absent_days"] = deductions["absent_days"]
        data["late_days"] = deductions["late_days"]
        data["absent_deduction"] = deductions["absent_deduction"]
        data["penalty_amount"] = deductions["penalty_amount"]
        data["advance_deductions"] = deductions["advance_deductions"]
        data["other_deductions"] = deductions["other_deductions"]
        data["total_deductions"] = deductions["total"]
        records.append(data)
    return records


def export_payroll_csv(path: Path, rows: Iterable[PayrollRecord]) -> Path:
    df = pd.DataFrame(register_rows(rows))
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path
