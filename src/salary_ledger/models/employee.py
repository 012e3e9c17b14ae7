"""Employee profile with embedded salary balance fields."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salary_ledger.models.base import Base, Money, TimestampMixin

if TYPE_CHECKING:
    from salary_ledger.models.salary import SalaryAllocation, SalaryWithdrawal


class Employee(Base, TimestampMixin):
    """Employee record.

    `period_allocated_amount` and `withdrawn_amount` only ever grow; the
    available balance is their difference and is never stored.
    """

    __tablename__ = "employee"

    employee_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    position: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")

    monthly_salary: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    period_allocated_amount: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )
    withdrawn_amount: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    current_period: Mapped[str | None] = mapped_column(String(7), nullable=True)
    last_salary_reset: Mapped[datetime | None] = mapped_column(nullable=True)
    salary_status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'inactive', 'terminated')",
            name="employee_status_check",
        ),
        CheckConstraint(
            "salary_status IN ('pending', 'allocated', 'partial', 'exhausted')",
            name="employee_salary_status_check",
        ),
        CheckConstraint("monthly_salary >= 0", name="employee_monthly_salary_check"),
    )

    # Relationships
    allocations: Mapped[list[SalaryAllocation]] = relationship(back_populates="employee")
    withdrawals: Mapped[list[SalaryWithdrawal]] = relationship(back_populates="employee")

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"

    @property
    def available_balance(self) -> Decimal:
        """Allocated minus withdrawn."""
        return (self.period_allocated_amount or Decimal("0")) - (
            self.withdrawn_amount or Decimal("0")
        )
