"""SQLAlchemy ORM models for the salary ledger."""

from salary_ledger.models.base import Base, TimestampMixin
from salary_ledger.models.employee import Employee
from salary_ledger.models.salary import SalaryAllocation, SalaryJobRun, SalaryWithdrawal

__all__ = [
    "Base",
    "TimestampMixin",
    "Employee",
    "SalaryAllocation",
    "SalaryJobRun",
    "SalaryWithdrawal",
]
