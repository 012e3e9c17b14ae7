"""Exceptions raised by the salary ledger services."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID


class SalaryLedgerError(Exception):
    """Base class for all ledger errors."""

    code = "LEDGER_ERROR"


class ValidationError(SalaryLedgerError):
    """Input rejected before any write."""

    code = "VALIDATION_ERROR"


class EmployeeNotFoundError(ValidationError):
    """Raised when the target employee does not exist."""

    code = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: UUID | str):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} not found")


class InvalidAmountError(ValidationError):
    """Raised for amounts that are not positive money values."""

    code = "INVALID_AMOUNT"

    def __init__(self, amount: Decimal | str, reason: str = "must be positive"):
        self.amount = amount
        self.reason = reason
        super().__init__(f"Amount {reason}, got {amount}")


class InvalidAllocationTypeError(ValidationError):
    code = "INVALID_ALLOCATION_TYPE"

    def __init__(self, allocation_type: str):
        self.allocation_type = allocation_type
        super().__init__(f"Unknown allocation type '{allocation_type}'")


class MonthlyCapExceededError(ValidationError):
    """Raised when a monthly allocation exceeds the employee's monthly salary."""

    code = "MONTHLY_CAP_EXCEEDED"

    def __init__(self, amount: Decimal, monthly_salary: Decimal):
        self.amount = amount
        self.monthly_salary = monthly_salary
        super().__init__(
            f"Cannot allocate {amount:,}. Employee's monthly salary is only {monthly_salary:,}"
        )


class InvalidPaymentMethodError(ValidationError):
    code = "INVALID_PAYMENT_METHOD"

    def __init__(self, payment_method: str):
        self.payment_method = payment_method
        super().__init__(f"Unknown payment method '{payment_method}'")


class MinimumWithdrawalError(ValidationError):
    """Raised when a withdrawal is below the payment method minimum."""

    code = "BELOW_MINIMUM_WITHDRAWAL"

    def __init__(self, messages: list[str]):
        self.messages = messages
        super().__init__("; ".join(messages))


class InsufficientBalanceError(ValidationError):
    """Raised when a withdrawal exceeds the available balance."""

    code = "INSUFFICIENT_BALANCE"

    def __init__(self, requested: Decimal, available: Decimal):
        self.requested = requested
        self.available = available
        super().__init__(f"Insufficient balance. Available: {available:,}, requested: {requested:,}")


class WithdrawalNotFoundError(ValidationError):
    code = "WITHDRAWAL_NOT_FOUND"

    def __init__(self, withdrawal_id: UUID | str):
        self.withdrawal_id = withdrawal_id
        super().__init__(f"Withdrawal {withdrawal_id} not found")


class InvalidTransitionError(SalaryLedgerError):
    """Raised when an invalid withdrawal status transition is attempted."""

    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
