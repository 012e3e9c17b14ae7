"""Allocation ledger, withdrawal and job run models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Float, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salary_ledger.models.base import Base, Money, TimestampMixin

if TYPE_CHECKING:
    from salary_ledger.models.employee import Employee


class SalaryAllocation(Base):
    """Audit ledger row: one per (employee, period, allocation type)."""

    __tablename__ = "salary_allocation"

    allocation_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    period: Mapped[str] = mapped_column(String(7), nullable=False)
    allocated_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    allocation_type: Mapped[str] = mapped_column(String(16), nullable=False)
    allocated_by: Mapped[str] = mapped_column(String(64), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    allocation_date: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "employee_id", "period", "allocation_type", name="salary_allocation_unique"
        ),
        CheckConstraint(
            "allocation_type IN ('monthly', 'bonus', 'advance', 'adjustment')",
            name="salary_allocation_type_check",
        ),
        CheckConstraint("allocated_amount > 0", name="salary_allocation_amount_check"),
    )

    employee: Mapped[Employee] = relationship(back_populates="allocations")


class SalaryWithdrawal(Base, TimestampMixin):
    """A drawdown against an employee's available balance."""

    __tablename__ = "salary_withdrawal"

    withdrawal_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    charges: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    net_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(16), nullable=False)
    destination: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reference: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    failure_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    requested_by: Mapped[str] = mapped_column(String(64), nullable=False)
    processed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'processing', 'completed', 'failed', 'cancelled')",
            name="salary_withdrawal_status_check",
        ),
        CheckConstraint(
            "payment_method IN ('mobile_money', 'bank_transfer')",
            name="salary_withdrawal_method_check",
        ),
        CheckConstraint("amount > 0", name="salary_withdrawal_amount_check"),
    )

    employee: Mapped[Employee] = relationship(back_populates="withdrawals")


class SalaryJobRun(Base, TimestampMixin):
    """Execution record for the bulk monthly allocation job."""

    __tablename__ = "salary_job_run"

    job_run_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    job_name: Mapped[str] = mapped_column(String(64), nullable=False)
    period: Mapped[str] = mapped_column(String(7), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    employees_updated: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_allocated: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    execution_seconds: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    triggered_by: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('success', 'failed', 'skipped')",
            name="salary_job_run_status_check",
        ),
    )
