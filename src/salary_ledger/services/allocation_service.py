"""Salary allocation service.

Applies allocations additively to an employee's running balance and keeps the
allocation ledger in step with it:
- One ledger row per (employee, period, allocation type); repeats add to it
- Balance and ledger are written in one transaction, or not at all
- The employee row is locked before the ledger lookup, serializing
  concurrent allocations for the same employee
- Notifications go out after commit and never undo the financial update
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salary_ledger.config import Settings, get_settings
from salary_ledger.context import RequestContext
from salary_ledger.errors import (
    EmployeeNotFoundError,
    InvalidAllocationTypeError,
    InvalidAmountError,
    MonthlyCapExceededError,
)
from salary_ledger.models import Employee, SalaryAllocation, SalaryJobRun
from salary_ledger.services.messages import (
    allocation_message,
    format_amount,
    monthly_allocation_message,
)
from salary_ledger.services.notifications import (
    NotificationDispatcher,
    NotificationOutcome,
    all_delivered,
)
from salary_ledger.services.periods import now_utc, period_label, period_token
from salary_ledger.services.salary_status import AllocationType, available_balance, classify_balance

logger = logging.getLogger(__name__)

MONTHLY_JOB_NAME = "monthly_salary_allocation"

# Money columns are Numeric(14, 2)
MONEY_PLACES = 2
MAX_AMOUNT = Decimal(10) ** (14 - MONEY_PLACES)
CENT = Decimal(1).scaleb(-MONEY_PLACES)


def to_amount(value: Decimal | int | str) -> Decimal:
    """Coerce an input amount to a positive Decimal that fits a money column.

    Raises:
        InvalidAmountError: not a number, not finite, not positive, more than
            two decimal places, or too large for `Numeric(14, 2)`
    """
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(str(value), "must be a number") from None

    if not amount.is_finite():
        raise InvalidAmountError(str(value), "must be finite")
    if amount <= 0:
        raise InvalidAmountError(amount)
    if amount >= MAX_AMOUNT:
        raise InvalidAmountError(amount, f"must be below {MAX_AMOUNT:,}")
    if amount != amount.quantize(CENT):
        raise InvalidAmountError(amount, f"must have at most {MONEY_PLACES} decimal places")
    return amount


def to_employee_id(value: UUID | str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise EmployeeNotFoundError(value) from None


@dataclass(frozen=True)
class AllocationResult:
    """Result of a single allocation.

    `is_new` is False when the amount was added to an existing ledger row.
    Check `partial_success` before telling the admin the employee was notified.
    """

    allocation_id: UUID
    employee_id: UUID
    period: str
    allocation_type: str
    amount: Decimal
    ledger_amount: Decimal
    is_new: bool
    period_allocated_amount: Decimal
    withdrawn_amount: Decimal
    salary_status: str
    notifications: tuple[NotificationOutcome, ...] = ()

    @property
    def available_balance(self) -> Decimal:
        return available_balance(self.period_allocated_amount, self.withdrawn_amount)

    @property
    def fully_notified(self) -> bool:
        return all_delivered(list(self.notifications))

    @property
    def partial_success(self) -> bool:
        """Money was allocated but at least one channel failed."""
        return not self.fully_notified


@dataclass(frozen=True)
class BulkAllocationResult:
    """Result of one bulk monthly allocation run."""

    period: str
    employees_updated: int
    total_allocated: Decimal
    allocated_employee_ids: tuple[UUID, ...]
    skipped_employee_ids: tuple[UUID, ...]
    job_run_id: UUID
    notifications: dict[UUID, tuple[NotificationOutcome, ...]] = field(default_factory=dict)

    @property
    def notification_failures(self) -> list[UUID]:
        """Employees for whom at least one channel failed."""
        return [
            employee_id
            for employee_id, outcomes in self.notifications.items()
            if not all_delivered(list(outcomes))
        ]


class AllocationService:
    """Records salary allocations against employee balances."""

    def __init__(
        self,
        session: AsyncSession,
        notifier: NotificationDispatcher | None = None,
        settings: Settings | None = None,
    ):
        self.session = session
        self.notifier = notifier or NotificationDispatcher()
        self.settings = settings or get_settings()

    async def allocate(
        self,
        ctx: RequestContext,
        *,
        employee_id: UUID | str,
        amount: Decimal | int | str,
        allocation_type: str,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> AllocationResult:
        """Allocate `amount` to one employee for the current period.

        Raises:
            InvalidAmountError: amount is not a positive money value
            InvalidAllocationTypeError: unknown allocation type
            EmployeeNotFoundError: no such employee
            MonthlyCapExceededError: monthly allocation above monthly salary
        """
        amount = to_amount(amount)
        try:
            alloc_type = AllocationType(allocation_type)
        except ValueError:
            raise InvalidAllocationTypeError(str(allocation_type)) from None
        emp_id = to_employee_id(employee_id)

        now = now or now_utc()
        period = period_token(now)

        try:
            employee = await self._lock_employee(emp_id)
            if alloc_type is AllocationType.MONTHLY and amount > employee.monthly_salary:
                raise MonthlyCapExceededError(amount, employee.monthly_salary)

            row, is_new = await self._apply_allocation(
                ctx, employee, amount, alloc_type, period, notes, now
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Allocated %s %s (%s) to employee %s for %s by %s",
            self.settings.currency,
            format_amount(amount),
            alloc_type.value,
            employee.employee_number,
            period,
            ctx.actor_id,
        )

        outcomes = await self.notifier.notify(
            employee.phone,
            allocation_message(self.settings, employee.first_name, amount, alloc_type.value),
        )

        return AllocationResult(
            allocation_id=row.allocation_id,
            employee_id=employee.employee_id,
            period=period,
            allocation_type=alloc_type.value,
            amount=amount,
            ledger_amount=row.allocated_amount,
            is_new=is_new,
            period_allocated_amount=employee.period_allocated_amount,
            withdrawn_amount=employee.withdrawn_amount,
            salary_status=employee.salary_status,
            notifications=tuple(outcomes),
        )

    async def allocate_monthly_salaries(
        self,
        ctx: RequestContext,
        *,
        now: datetime | None = None,
    ) -> BulkAllocationResult:
        """Allocate the monthly salary to every active salaried employee.

        Employees that already hold a monthly ledger row for the period are
        skipped, so repeated runs in one period allocate nothing further.
        The whole batch commits together; a failed run is rolled back and
        recorded as a failed job run.
        """
        now = now or now_utc()
        period = period_token(now)
        started = time.monotonic()
        note = f"Monthly salary allocation for {period_label(period)}"

        allocated: list[Employee] = []
        skipped: list[UUID] = []
        total = Decimal("0")

        try:
            result = await self.session.execute(
                select(Employee)
                .where(Employee.status == "active", Employee.monthly_salary > 0)
                .order_by(Employee.employee_number)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            employees = list(result.scalars().all())

            # Read after taking the employee locks
            already_allocated = set(
                (
                    await self.session.execute(
                        select(SalaryAllocation.employee_id).where(
                            SalaryAllocation.period == period,
                            SalaryAllocation.allocation_type == AllocationType.MONTHLY.value,
                        )
                    )
                )
                .scalars()
                .all()
            )

            for employee in employees:
                if employee.employee_id in already_allocated:
                    skipped.append(employee.employee_id)
                    continue
                await self._apply_allocation(
                    ctx,
                    employee,
                    employee.monthly_salary,
                    AllocationType.MONTHLY,
                    period,
                    note,
                    now,
                )
                allocated.append(employee)
                total += employee.monthly_salary

            job_run = SalaryJobRun(
                job_name=MONTHLY_JOB_NAME,
                period=period,
                status="success",
                message=(
                    f"Allocated salaries to {len(allocated)} employees. "
                    f"Total: {self.settings.currency} {format_amount(total)}"
                ),
                employees_updated=len(allocated),
                total_allocated=total,
                execution_seconds=time.monotonic() - started,
                triggered_by=ctx.actor_id,
            )
            self.session.add(job_run)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.exception("Monthly salary allocation failed for %s", period)
            await self._record_failed_run(ctx, period, e, started)
            raise

        logger.info(
            "Monthly salary allocation for %s: %d allocated, %d skipped, total %s %s",
            period,
            len(allocated),
            len(skipped),
            self.settings.currency,
            format_amount(total),
        )

        notifications: dict[UUID, tuple[NotificationOutcome, ...]] = {}
        for employee in allocated:
            outcomes = await self.notifier.notify(
                employee.phone,
                monthly_allocation_message(
                    self.settings, employee.first_name, employee.monthly_salary, period
                ),
            )
            notifications[employee.employee_id] = tuple(outcomes)

        return BulkAllocationResult(
            period=period,
            employees_updated=len(allocated),
            total_allocated=total,
            allocated_employee_ids=tuple(e.employee_id for e in allocated),
            skipped_employee_ids=tuple(skipped),
            job_run_id=job_run.job_run_id,
            notifications=notifications,
        )

    async def record_skipped_run(
        self,
        ctx: RequestContext,
        *,
        reason: str,
        now: datetime | None = None,
    ) -> SalaryJobRun:
        """Record that the scheduled job ran but did nothing."""
        job_run = SalaryJobRun(
            job_name=MONTHLY_JOB_NAME,
            period=period_token(now or now_utc()),
            status="skipped",
            message=reason,
            triggered_by=ctx.actor_id,
        )
        self.session.add(job_run)
        await self.session.commit()
        return job_run

    async def get_employee(self, employee_id: UUID | str) -> Employee:
        """Fetch an employee balance record without locking."""
        emp_id = to_employee_id(employee_id)
        employee = await self.session.get(Employee, emp_id)
        if employee is None:
            raise EmployeeNotFoundError(emp_id)
        return employee

    async def recent_job_runs(self, limit: int = 5) -> list[SalaryJobRun]:
        result = await self.session.execute(
            select(SalaryJobRun)
            .where(SalaryJobRun.job_name == MONTHLY_JOB_NAME)
            .order_by(SalaryJobRun.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def _lock_employee(self, employee_id: UUID) -> Employee:
        result = await self.session.execute(
            select(Employee)
            .where(Employee.employee_id == employee_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def _apply_allocation(
        self,
        ctx: RequestContext,
        employee: Employee,
        amount: Decimal,
        alloc_type: AllocationType,
        period: str,
        notes: str | None,
        now: datetime,
    ) -> tuple[SalaryAllocation, bool]:
        """Upsert the ledger row and add to the balance. Caller commits.

        Returns the ledger row and whether it was newly created.
        """
        existing = await self.session.execute(
            select(SalaryAllocation)
            .where(
                SalaryAllocation.employee_id == employee.employee_id,
                SalaryAllocation.period == period,
                SalaryAllocation.allocation_type == alloc_type.value,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = existing.scalar_one_or_none()

        if row is None:
            row = SalaryAllocation(
                employee_id=employee.employee_id,
                period=period,
                allocated_amount=amount,
                allocation_type=alloc_type.value,
                allocated_by=ctx.actor_id,
                notes=notes or None,
                allocation_date=now,
            )
            self.session.add(row)
            is_new = True
        else:
            row.allocated_amount = row.allocated_amount + amount
            row.allocation_date = now
            if notes:
                row.notes = f"{row.notes}\n{notes}" if row.notes else notes
            is_new = False

        employee.period_allocated_amount = employee.period_allocated_amount + amount
        employee.current_period = period
        employee.last_salary_reset = now
        employee.salary_status = classify_balance(
            employee.period_allocated_amount, employee.withdrawn_amount
        ).value

        await self.session.flush()
        return row, is_new

    async def _record_failed_run(
        self,
        ctx: RequestContext,
        period: str,
        error: Exception,
        started: float,
    ) -> None:
        """Persist a failed job run after the batch was rolled back."""
        try:
            self.session.add(
                SalaryJobRun(
                    job_name=MONTHLY_JOB_NAME,
                    period=period,
                    status="failed",
                    message=str(error) or type(error).__name__,
                    execution_seconds=time.monotonic() - started,
                    triggered_by=ctx.actor_id,
                )
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            logger.exception("Could not record failed job run for %s", period)
