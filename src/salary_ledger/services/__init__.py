"""Salary ledger services."""

from salary_ledger.services.allocation_service import (
    AllocationResult,
    AllocationService,
    BulkAllocationResult,
)
from salary_ledger.services.notifications import (
    LogNotificationGateway,
    NotificationDispatcher,
    NotificationGateway,
    NotificationOutcome,
)
from salary_ledger.services.salary_status import AllocationType, SalaryStatus, classify_balance
from salary_ledger.services.withdrawal_service import WithdrawalResult, WithdrawalService
from salary_ledger.services.withdrawal_state import WithdrawalStateMachine, WithdrawalStatus

__all__ = [
    "AllocationResult",
    "AllocationService",
    "AllocationType",
    "BulkAllocationResult",
    "LogNotificationGateway",
    "NotificationDispatcher",
    "NotificationGateway",
    "NotificationOutcome",
    "SalaryStatus",
    "WithdrawalResult",
    "WithdrawalService",
    "WithdrawalStateMachine",
    "WithdrawalStatus",
    "classify_balance",
]
