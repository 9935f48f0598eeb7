from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Iterable

import pandas as pd

from guardops.core.schema import PayrollRecord
from guardops.exporters.payroll_csv import register_rows


def _to_cell(value):
    # pandas writes unknown objects as text
    return float(value) if isinstance(value, Decimal) else value


def export_payroll_xlsx(path: Path, rows: Iterable[PayrollRecord], *, sheet_name: str = "payroll") -> Path:
    df = pd.DataFrame(register_rows(rows)).map(_to_cell)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_excel(path, index=False, sheet_name=sheet_name, engine="openpyxl")
    return path
