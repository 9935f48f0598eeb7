from __future__ import annotations

import os
from pathlib import Path

from guardops.core.periods import format_period, parse_period


def _base_root() -> Path:
    env_root = os.getenv("GUARDOPS_EXPORTS_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path(__file__).resolve().parents[2] / "exports"


def ensure_export_dir(period_month: str | None = None) -> Path:
    """Ensure the export folder for ``period_month`` exists and return it.

    The period is validated before any directory is created, so only
    ``YYYY-MM`` folders (or ``all``) ever appear under the exports root.
    """

    folder = format_period(*parse_period(period_month)) if period_month is not None else "all"
    root = _base_root() / folder
    root.mkdir(parents=True, exist_ok=True)
    return root
