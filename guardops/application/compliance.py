"""Application service layer for compliance scoring."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable

from guardops.core.compliance import deduction_score, score_compliance
from guardops.core.rules import ComplianceRules
from guardops.core.schema import ComplianceCategory, ComplianceHistoryEntry, ComplianceScore
from guardops.infrastructure import ComplianceRepository

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ComplianceService:
    def __init__(
        self,
        repository: ComplianceRepository,
        rules: ComplianceRules | None = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._repository = repository
        self._rules = rules or ComplianceRules()
        self._clock = clock

    @property
    def rules(self) -> ComplianceRules:
        return self._rules

    def configure(self, rules: ComplianceRules) -> None:
        self._rules = rules

    def set_categories(self, categories: Iterable[ComplianceCategory]) -> None:
        self._repository.set_categories(list(categories), updated_at=self._clock().isoformat())

    def list_categories(self) -> list[ComplianceCategory]:
        return self._repository.list_categories()

    def score(self, *, limit: int | None = None) -> ComplianceScore:
        """Score the current categories against the latest recorded snapshot."""

        return score_compliance(
            self._repository.list_categories(),
            previous=self._repository.latest_history(),
            rules=self._rules,
            limit=limit,
            last_updated=self._repository.last_updated(),
        )

    def record_snapshot(self, on_date: str | None = None) -> ComplianceHistoryEntry:
        result = self.score()
        entry = ComplianceHistoryEntry(
            date=on_date or self._clock().date().isoformat(),
            score=result.overall,
            category_scores={category.id: category.score for category in result.categories},
        )
        self._repository.add_history(entry)
        logger.info("recorded compliance snapshot %s score=%s trend=%s", entry.date, entry.score, result.trend)
        return entry

    def list_history(self) -> list[ComplianceHistoryEntry]:
        return self._repository.list_history()

    def deduction_score(
        self,
        *,
        expiring_licenses: int = 0,
        expiring_trainings: int = 0,
        expiring_agreements: int = 0,
        pending_wages: int = 0,
    ) -> int:
        return deduction_score(
            expiring_licenses=expiring_licenses,
            expiring_trainings=expiring_trainings,
            expiring_agreements=expiring_agreements,
            pending_wages=pending_wages,
            rules=self._rules,
        )

    def reset(self) -> None:
        self._repository.reset()
