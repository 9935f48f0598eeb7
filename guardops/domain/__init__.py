"""Domain layer definitions."""

from .state import ComplianceState, PayrollState

__all__ = [
    "ComplianceState",
    "PayrollState",
]
