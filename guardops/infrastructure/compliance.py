"""Infrastructure layer for compliance data."""
from __future__ import annotations

from typing import Protocol

from guardops.core.schema import ComplianceCategory, ComplianceHistoryEntry
from guardops.domain import ComplianceState


class ComplianceRepository(Protocol):
    """Source of the current compliance categories and the score history."""

    def set_categories(self, categories: list[ComplianceCategory], *, updated_at: str | None = None) -> None: ...

    def list_categories(self) -> list[ComplianceCategory]: ...

    def last_updated(self) -> str | None: ...

    def add_history(self, entry: ComplianceHistoryEntry) -> None: ...

    def list_history(self) -> list[ComplianceHistoryEntry]: ...

    def latest_history(self) -> ComplianceHistoryEntry | None: ...

    def reset(self) -> None: ...


class InMemoryComplianceRepository:
    def __init__(self) -> None:
        self._state = ComplianceState()

    def set_categories(self, categories: list[ComplianceCategory], *, updated_at: str | None = None) -> None:
        self._state.categories = list(categories)
        self._state.last_updated = updated_at

    def list_categories(self) -> list[ComplianceCategory]:
        return list(self._state.categories)

    def last_updated(self) -> str | None:
        return self._state.last_updated

    def add_history(self, entry: ComplianceHistoryEntry) -> None:
        self._state.history.append(entry)

    def list_history(self) -> list[ComplianceHistoryEntry]:
        return list(self._state.history)

    def latest_history(self) -> ComplianceHistoryEntry | None:
        return self._state.history[-1] if self._state.history else None

    def reset(self) -> None:
        self._state = ComplianceState()
