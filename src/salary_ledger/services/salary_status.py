"""Balance status classification for employee salary balances."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum


class SalaryStatus(str, Enum):
    """Salary balance status values."""

    PENDING = "pending"
    ALLOCATED = "allocated"
    PARTIAL = "partial"
    EXHAUSTED = "exhausted"


class AllocationType(str, Enum):
    """Allocation ledger row types."""

    MONTHLY = "monthly"
    BONUS = "bonus"
    ADVANCE = "advance"
    ADJUSTMENT = "adjustment"


ZERO = Decimal("0")


def classify_balance(allocated: Decimal, withdrawn: Decimal) -> SalaryStatus:
    """Derive the balance status from allocated and withdrawn totals.

    - nothing allocated yet -> pending
    - withdrawn covers everything allocated -> exhausted
    - some withdrawn -> partial
    - otherwise -> allocated
    """
    allocated = allocated or ZERO
    withdrawn = withdrawn or ZERO

    if allocated <= ZERO:
        return SalaryStatus.PENDING
    if withdrawn >= allocated:
        return SalaryStatus.EXHAUSTED
    if withdrawn > ZERO:
        return SalaryStatus.PARTIAL
    return SalaryStatus.ALLOCATED


def available_balance(allocated: Decimal, withdrawn: Decimal) -> Decimal:
    """Amount still available to withdraw."""
    return (allocated or ZERO) - (withdrawn or ZERO)
