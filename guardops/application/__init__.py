"""Application services."""

from .compliance import ComplianceService
from .payroll import PayrollService
from .wiring import configure_services, get_compliance_service, get_payroll_service, reset_state

__all__ = [
    "ComplianceService",
    "PayrollService",
    "configure_services",
    "get_compliance_service",
    "get_payroll_service",
    "reset_state",
]
