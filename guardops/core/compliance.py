"""Weighted compliance roll-up: items -> categories -> overall score."""
from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Sequence

from guardops.core.rules import ComplianceRules, WeightPolicy
from guardops.core.schema import (
    CategoryTrend,
    ComplianceCategory,
    ComplianceHistoryEntry,
    ComplianceScore,
    OverallTrend,
)
from guardops.core.validation import WeightSumMismatch

logger = logging.getLogger(__name__)

DEFAULT_RULES = ComplianceRules()

LEVELS: list[tuple[int, str]] = [
    (90, "Excellent"),
    (70, "Good"),
    (50, "Fair"),
]


def _dec(value: float | int | Decimal) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def effective_weights(
    categories: Sequence[ComplianceCategory],
    policy: WeightPolicy = "ignore",
    tolerance: Decimal = Decimal("0.000001"),
) -> list[Decimal]:
    """Return the weight applied to each category under ``policy``.

    ``ignore`` uses the weights as given, ``reject`` raises when they do not
    sum to one, ``normalize`` rescales them so that they do.
    """

    weights = [_dec(category.weight) for category in categories]
    total = sum(weights, Decimal("0"))
    if policy == "ignore" or not weights:
        return weights
    if abs(total - Decimal("1")) <= tolerance:
        return weights
    if policy == "reject":
        raise WeightSumMismatch(f"category weights sum to {total}, expected 1")
    if total == 0:
        raise WeightSumMismatch("category weights sum to 0 and cannot be normalized")
    logger.info("normalizing compliance weights summing to %s", total)
    return [weight / total for weight in weights]


def weighted_overall(
    categories: Sequence[ComplianceCategory],
    policy: WeightPolicy = "ignore",
    tolerance: Decimal = Decimal("0.000001"),
) -> int:
    weights = effective_weights(categories, policy, tolerance)
    total = sum((_dec(category.score) * weight for category, weight in zip(categories, weights)), Decimal("0"))
    return int(total.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compare_trend(current: float, previous: float | None) -> OverallTrend:
    if previous is None or current == previous:
        return "stable"
    return "improving" if current > previous else "declining"


def category_trend(current: float, previous: float | None) -> CategoryTrend:
    return {"improving": "up", "declining": "down", "stable": "stable"}[compare_trend(current, previous)]


def collect_recommendations(categories: Iterable[ComplianceCategory], limit: int | None = None) -> list[str]:
    """Remediation notes of all items, in category order."""

    notes = [
        item.action_required
        for category in categories
        for item in category.items
        if item.action_required and item.action_required.strip()
    ]
    if limit is not None:
        return notes[: max(limit, 0)]
    return notes


def score_level(score: float) -> str:
    for threshold, label in LEVELS:
        if score >= threshold:
            return label
    return "Poor"


def reconcile_category(category: ComplianceCategory) -> bool | None:
    """Whether the category score equals the sum of its item scores.

    ``None`` for a category without items, where there is nothing to compare.
    """

    if not category.items:
        return None
    item_total = sum((_dec(item.score) for item in category.items), Decimal("0"))
    return item_total == _dec(category.score)


def category_warnings(categories: Iterable[ComplianceCategory]) -> list[str]:
    warnings: list[str] = []
    for category in categories:
        if not category.items:
            logger.warning("category %s has no items, keeping assigned score %s", category.id, category.score)
            warnings.append(f"category {category.id} has no items; its score of {category.score} was taken as assigned")
    return warnings


def score_compliance(
    categories: Sequence[ComplianceCategory],
    *,
    previous: ComplianceHistoryEntry | None = None,
    rules: ComplianceRules = DEFAULT_RULES,
    limit: int | None = None,
    last_updated: str | None = None,
) -> ComplianceScore:
    overall = weighted_overall(categories, rules.weight_policy, rules.weight_tolerance)

    scored: list[ComplianceCategory] = []
    for category in categories:
        if previous is not None and category.id in previous.category_scores:
            trend = category_trend(category.score, previous.category_scores[category.id])
            scored.append(category.model_copy(update={"trend": trend}))
        else:
            scored.append(category)

    return ComplianceScore(
        overall=overall,
        categories=scored,
        last_updated=last_updated,
        trend=compare_trend(overall, previous.score if previous else None),
        level=score_level(overall),
        recommendations=collect_recommendations(scored, limit if limit is not None else rules.recommendation_limit),
        warnings=category_warnings(scored),
    )


def deduction_score(
    *,
    expiring_licenses: int = 0,
    expiring_trainings: int = 0,
    expiring_agreements: int = 0,
    pending_wages: int = 0,
    rules: ComplianceRules = DEFAULT_RULES,
) -> int:
    """Dashboard score: start at 100 and subtract a penalty per open issue."""

    score = 100
    score -= expiring_licenses * rules.license_penalty
    score -= expiring_trainings * rules.training_penalty
    score -= expiring_agreements * rules.agreement_penalty
    score -= pending_wages * rules.wage_penalty
    return max(0, min(100, score))
