import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from guardops.core.compliance import (
    collect_recommendations,
    compare_trend,
    deduction_score,
    effective_weights,
    reconcile_category,
    score_compliance,
    score_level,
    weighted_overall,
)
from guardops.core.rules import ComplianceRules
from guardops.core.schema import ComplianceCategory, ComplianceHistoryEntry, ComplianceItem
from guardops.core.validation import WeightSumMismatch


def _item(item_id: str, score: float, max_score: float, *, status: str = "compliant", action: str | None = None) -> ComplianceItem:
    return ComplianceItem(
        id=item_id,
        name=item_id,
        status=status,
        score=score,
        max_score=max_score,
        action_required=action,
    )


def _categories() -> list[ComplianceCategory]:
    return [
        ComplianceCategory(
            id="licenses",
            name="Guard Licenses",
            score=85,
            weight=0.3,
            items=[
                _item("lic1", 25, 25),
                _item("lic2", 15, 25, status="partial", action="Submit renewal applications"),
                _item("lic3", 20, 20),
                _item("lic4", 15, 15),
            ],
        ),
        ComplianceCategory(
            id="training",
            name="Training Records",
            score=72,
            weight=0.25,
            trend="up",
            items=[
                _item("train1", 20, 20),
                _item("train2", 12, 20, status="partial", action="Schedule training sessions"),
                _item("train3", 15, 15),
                _item("train4", 10, 15, status="partial", action="Update training records"),
            ],
        ),
        ComplianceCategory(
            id="agreements",
            name="Client Agreements",
            score=80,
            weight=0.2,
            items=[
                _item("ag1", 25, 25),
                _item("ag2", 18, 25, status="partial", action="Send renewal notices"),
                _item("ag3", 20, 20),
                _item("ag4", 17, 20),
            ],
        ),
        ComplianceCategory(
            id="wages",
            name="Wage Compliance",
            score=75,
            weight=0.25,
            trend="down",
            items=[
                _item("wage1", 25, 25),
                _item("wage2", 15, 20, status="partial", action="Process pending overtime payments"),
                _item("wage3", 20, 20),
                _item("wage4", 15, 20, status="partial", action="Verify payroll records"),
            ],
        ),
    ]


def test_reference_overall_score():
    # 25.5 + 18 + 16 + 18.75 = 78.25
    assert weighted_overall(_categories()) == 78


def test_overall_rounds_half_up():
    categories = [
        ComplianceCategory(id="a", name="a", score=79, weight=0.5),
        ComplianceCategory(id="b", name="b", score=78, weight=0.5),
    ]
    assert weighted_overall(categories) == 79


def test_scoring_is_idempotent():
    categories = _categories()
    assert score_compliance(categories) == score_compliance(categories)


def test_trend_compares_with_previous_score():
    assert compare_trend(78, 76) == "improving"
    assert compare_trend(74, 76) == "declining"
    assert compare_trend(76, 76) == "stable"
    assert compare_trend(76, None) == "stable"


def test_score_uses_previous_snapshot_for_trends():
    previous = ComplianceHistoryEntry(
        date="2024-01-15",
        score=76,
        category_scores={"licenses": 84, "training": 72, "agreements": 81},
    )
    result = score_compliance(_categories(), previous=previous)

    assert result.overall == 78
    assert result.trend == "improving"
    trends = {category.id: category.trend for category in result.categories}
    assert trends["licenses"] == "up"
    assert trends["training"] == "stable"
    assert trends["agreements"] == "down"
    # no prior data for wages, supplied trend is kept
    assert trends["wages"] == "down"


def test_recommendations_follow_category_order():
    notes = collect_recommendations(_categories())
    assert notes == [
        "Submit renewal applications",
        "Schedule training sessions",
        "Update training records",
        "Send renewal notices",
        "Process pending overtime payments",
        "Verify payroll records",
    ]
    assert collect_recommendations(_categories(), limit=2) == notes[:2]
    assert score_compliance(_categories(), limit=2).recommendations == notes[:2]


def test_status_is_not_inferred_from_score():
    category = ComplianceCategory(
        id="x",
        name="x",
        score=0,
        weight=1,
        items=[_item("x1", 0, 10, status="compliant")],
    )
    result = score_compliance([category])
    assert result.categories[0].items[0].status == "compliant"


def test_score_levels():
    assert score_level(95) == "Excellent"
    assert score_level(90) == "Excellent"
    assert score_level(78) == "Good"
    assert score_level(50) == "Fair"
    assert score_level(49) == "Poor"
    assert score_compliance(_categories()).level == "Good"


def test_empty_category_keeps_assigned_score_and_is_flagged():
    categories = [
        ComplianceCategory(id="licenses", name="Licenses", score=60, weight=0.5),
        ComplianceCategory(id="training", name="Training", score=80, weight=0.5, items=[_item("t", 40, 50)]),
    ]
    result = score_compliance(categories)

    assert result.overall == 70
    assert len(result.warnings) == 1
    assert "licenses" in result.warnings[0]


def test_reconcile_category():
    matching = ComplianceCategory(id="m", name="m", score=35, weight=1, items=[_item("m1", 20, 20), _item("m2", 15, 20)])
    assert reconcile_category(matching) is True
    # reference training items add up to 57 while the category reports 72
    assert reconcile_category(_categories()[1]) is False
    assert reconcile_category(ComplianceCategory(id="e", name="e", score=10, weight=1)) is None


def test_weight_policies():
    categories = [
        ComplianceCategory(id="a", name="a", score=80, weight=0.6),
        ComplianceCategory(id="b", name="b", score=60, weight=0.6),
    ]
    # ignore: 48 + 36
    assert weighted_overall(categories) == 84
    assert weighted_overall(categories, "normalize") == 70
    with pytest.raises(WeightSumMismatch):
        weighted_overall(categories, "reject")

    assert weighted_overall(_categories(), "reject") == 78


def test_normalize_rejects_zero_weights():
    categories = [ComplianceCategory(id="a", name="a", score=80, weight=0)]
    with pytest.raises(WeightSumMismatch):
        effective_weights(categories, "normalize")


def test_reject_policy_from_rules():
    categories = [ComplianceCategory(id="a", name="a", score=80, weight=0.5)]
    with pytest.raises(WeightSumMismatch):
        score_compliance(categories, rules=ComplianceRules(weight_policy="reject"))


def test_deduction_score():
    assert deduction_score() == 100
    assert deduction_score(expiring_licenses=3, expiring_trainings=5, expiring_agreements=2, pending_wages=4) == 52
    assert deduction_score(expiring_licenses=30) == 0
    rules = ComplianceRules(license_penalty=10)
    assert deduction_score(expiring_licenses=2, rules=rules) == 80
