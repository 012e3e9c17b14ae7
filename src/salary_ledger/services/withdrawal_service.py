"""Salary withdrawal service.

Draws an employee's available balance down. The balance check and the
deduction happen under the employee row lock, so a withdrawal can never take
`withdrawn_amount` above `period_allocated_amount`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salary_ledger.config import Settings, get_settings
from salary_ledger.context import RequestContext
from salary_ledger.errors import (
    EmployeeNotFoundError,
    InsufficientBalanceError,
    InvalidPaymentMethodError,
    MinimumWithdrawalError,
    WithdrawalNotFoundError,
)
from salary_ledger.models import Employee, SalaryWithdrawal
from salary_ledger.services.allocation_service import to_amount, to_employee_id
from salary_ledger.services.messages import format_amount, withdrawal_message
from salary_ledger.services.notifications import NotificationDispatcher, NotificationOutcome
from salary_ledger.services.periods import now_utc
from salary_ledger.services.salary_status import classify_balance
from salary_ledger.services.withdrawal_charges import (
    PaymentMethod,
    charge_breakdown,
    validate_minimum,
)
from salary_ledger.services.withdrawal_state import WithdrawalStateMachine, WithdrawalStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WithdrawalResult:
    """A withdrawal together with the notifications sent about it."""

    withdrawal: SalaryWithdrawal
    available_balance: Decimal
    salary_status: str
    notifications: tuple[NotificationOutcome, ...] = ()


class WithdrawalService:
    """Records withdrawals and their status changes."""

    def __init__(
        self,
        session: AsyncSession,
        notifier: NotificationDispatcher | None = None,
        settings: Settings | None = None,
    ):
        self.session = session
        self.notifier = notifier or NotificationDispatcher()
        self.settings = settings or get_settings()

    async def request_withdrawal(
        self,
        ctx: RequestContext,
        *,
        employee_id: UUID | str,
        amount: Decimal | int | str,
        payment_method: str,
        destination: str | None = None,
    ) -> WithdrawalResult:
        """Deduct `amount` (charges included) from the available balance.

        Raises:
            InvalidAmountError, InvalidPaymentMethodError, MinimumWithdrawalError,
            EmployeeNotFoundError, InsufficientBalanceError
        """
        amount = to_amount(amount)
        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            raise InvalidPaymentMethodError(str(payment_method)) from None
        errors = validate_minimum(amount, method)
        if errors:
            raise MinimumWithdrawalError(errors)
        emp_id = to_employee_id(employee_id)
        breakdown = charge_breakdown(amount, method)

        try:
            result = await self.session.execute(
                select(Employee)
                .where(Employee.employee_id == emp_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            employee = result.scalar_one_or_none()
            if employee is None:
                raise EmployeeNotFoundError(emp_id)

            available = employee.available_balance
            if amount > available:
                raise InsufficientBalanceError(amount, available)

            employee.withdrawn_amount = employee.withdrawn_amount + amount
            employee.salary_status = classify_balance(
                employee.period_allocated_amount, employee.withdrawn_amount
            ).value

            withdrawal = SalaryWithdrawal(
                employee_id=employee.employee_id,
                amount=amount,
                charges=breakdown.charges,
                net_amount=breakdown.net_amount,
                payment_method=method.value,
                destination=destination,
                reference=f"WD-{uuid4().hex[:16].upper()}",
                status=WithdrawalStatus.PENDING.value,
                requested_by=ctx.actor_id,
            )
            self.session.add(withdrawal)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Withdrawal %s of %s %s for employee %s (charges %s)",
            withdrawal.reference,
            self.settings.currency,
            format_amount(amount),
            employee.employee_number,
            format_amount(breakdown.charges),
        )

        outcomes = await self.notifier.notify(
            employee.phone,
            withdrawal_message(self.settings, breakdown.net_amount, withdrawal.status),
        )
        return WithdrawalResult(
            withdrawal=withdrawal,
            available_balance=employee.available_balance,
            salary_status=employee.salary_status,
            notifications=tuple(outcomes),
        )

    async def update_status(
        self,
        withdrawal_id: UUID | str,
        new_status: str,
        *,
        failure_reason: str | None = None,
        now: datetime | None = None,
    ) -> WithdrawalResult:
        """Move a withdrawal to `new_status`.

        The deducted amount is not restored on failure or cancellation;
        `withdrawn_amount` only grows.

        Raises:
            WithdrawalNotFoundError: unknown withdrawal
            InvalidTransitionError: transition not allowed
        """
        try:
            w_id = withdrawal_id if isinstance(withdrawal_id, UUID) else UUID(str(withdrawal_id))
        except ValueError:
            raise WithdrawalNotFoundError(withdrawal_id) from None

        try:
            result = await self.session.execute(
                select(SalaryWithdrawal)
                .where(SalaryWithdrawal.withdrawal_id == w_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            withdrawal = result.scalar_one_or_none()
            if withdrawal is None:
                raise WithdrawalNotFoundError(w_id)

            WithdrawalStateMachine.validate_transition(withdrawal.status, new_status)
            target = WithdrawalStatus(new_status)

            withdrawal.status = target.value
            if target is WithdrawalStatus.COMPLETED:
                withdrawal.processed_at = now or now_utc()
            elif target is WithdrawalStatus.FAILED:
                withdrawal.processed_at = now or now_utc()
                withdrawal.failure_reason = failure_reason or "Transaction failed"

            employee = await self.session.get(Employee, withdrawal.employee_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Withdrawal %s moved to %s", withdrawal.reference, withdrawal.status)

        assert employee is not None
        outcomes = await self.notifier.notify(
            employee.phone,
            withdrawal_message(
                self.settings,
                withdrawal.net_amount,
                withdrawal.status,
                withdrawal.failure_reason,
            ),
        )
        return WithdrawalResult(
            withdrawal=withdrawal,
            available_balance=employee.available_balance,
            salary_status=employee.salary_status,
            notifications=tuple(outcomes),
        )
