"""Tunable payroll and compliance constants.

Jurisdiction specific numbers (working-day divisor, late penalty, default
deductions, dashboard penalties) live in ``config/rules.yaml`` and can be
replaced per deployment by pointing ``GUARDOPS_RULES_PATH`` at another file.
"""
from __future__ import annotations

import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
DEFAULT_RULES_PATH = CONFIG_DIR / "rules.yaml"

WeightPolicy = Literal["ignore", "reject", "normalize"]

logger = logging.getLogger(__name__)


class PayrollRules(BaseModel):
    rule_version: str = "rules_v1"
    working_days_divisor: Decimal = Decimal("26")
    shift_hours: Decimal = Decimal("8")
    late_penalty_per_day: Decimal = Decimal("200")
    advance_deductions: Decimal = Decimal("1000")
    other_deductions: Decimal = Decimal("500")


class ComplianceRules(BaseModel):
    weight_policy: WeightPolicy = "ignore"
    weight_tolerance: Decimal = Decimal("0.000001")
    recommendation_limit: int | None = None
    license_penalty: int = 5
    training_penalty: int = 3
    agreement_penalty: int = 5
    wage_penalty: int = 2


class RuleSet(BaseModel):
    payroll: PayrollRules = Field(default_factory=PayrollRules)
    compliance: ComplianceRules = Field(default_factory=ComplianceRules)


def _rules_path(path: str | Path | None) -> Path:
    if path:
        return Path(path).expanduser()
    env_path = os.getenv("GUARDOPS_RULES_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_RULES_PATH


def load_rules(path: str | Path | None = None) -> RuleSet:
    """Load the rule set from YAML, falling back to built-in defaults."""

    target = _rules_path(path)
    if not target.exists():
        logger.warning("rules file %s not found, using built-in defaults", target)
        return RuleSet()
    with target.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    rules = RuleSet(**data)
    logger.info("loaded %s from %s", rules.payroll.rule_version, target)
    return rules
