from __future__ import annotations

import re
from datetime import date

from guardops.core.validation import InvalidPeriod

_PERIOD_RE = re.compile(r"(\d{4})-(\d{2})")


def format_period(year: int, month: int) -> str:
    """Build the ``YYYY-MM`` key used for attendance summaries and payroll records."""

    if not 1 <= int(month) <= 12:
        raise InvalidPeriod(f"month must be between 1 and 12, got {month}")
    if not 1 <= int(year) <= 9999:
        raise InvalidPeriod(f"year out of range: {year}")
    return f"{int(year):04d}-{int(month):02d}"


def parse_period(value: str) -> tuple[int, int]:
    match = _PERIOD_RE.fullmatch(str(value or "").strip())
    if not match:
        raise InvalidPeriod(f"period must be formatted as YYYY-MM, got {value!r}")
    year, month = int(match.group(1)), int(match.group(2))
    format_period(year, month)
    return year, month


def period_start(value: str) -> date:
    year, month = parse_period(value)
    return date(year, month, 1)

