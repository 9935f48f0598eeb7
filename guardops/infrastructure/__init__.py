"""Infrastructure layer exports."""

from .compliance import ComplianceRepository, InMemoryComplianceRepository
from .payroll import InMemoryPayrollRepository, PayrollRepository

__all__ = [
    "ComplianceRepository",
    "InMemoryComplianceRepository",
    "InMemoryPayrollRepository",
    "PayrollRepository",
]
