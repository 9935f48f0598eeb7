"""Process-wide default service instances."""
from __future__ import annotations

from guardops.core.rules import RuleSet
from guardops.infrastructure import InMemoryComplianceRepository, InMemoryPayrollRepository

from .compliance import ComplianceService
from .payroll import PayrollService

_payroll_service = PayrollService(InMemoryPayrollRepository())
_compliance_service = ComplianceService(InMemoryComplianceRepository())


def get_payroll_service() -> PayrollService:
    """Return the singleton payroll service for the process."""

    return _payroll_service


def get_compliance_service() -> ComplianceService:
    """Return the singleton compliance service for the process."""

    return _compliance_service


def configure_services(rules: RuleSet) -> None:
    _payroll_service.configure(rules.payroll)
    _compliance_service.configure(rules.compliance)


def reset_state() -> None:
    """Reset the in-memory stores (used in tests)."""

    _payroll_service.reset()
    _compliance_service.reset()
