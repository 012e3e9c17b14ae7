"""Property-based tests for balance and charge invariants.

Random sequences of allocations and withdrawals must never leave the
balance negative, and the derived status must always agree with the totals.
"""

from __future__ import annotations

from decimal import Decimal

from hypothesis import given, settings, strategies as st

from salary_ledger.services.salary_status import (
    SalaryStatus,
    available_balance,
    classify_balance,
)
from salary_ledger.services.withdrawal_charges import (
    MINIMUM_WITHDRAWAL,
    PaymentMethod,
    charge_breakdown,
)

amounts = st.decimals(
    min_value=Decimal("0.01"),
    max_value=Decimal("100000000"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)

operations = st.lists(
    st.tuples(st.sampled_from(["allocate", "withdraw"]), amounts),
    max_size=40,
)


@given(allocated=amounts, data=st.data())
def test_status_agrees_with_totals(allocated, data):
    withdrawn = data.draw(
        st.decimals(min_value=Decimal("0"), max_value=allocated, places=2)
    )
    status = classify_balance(allocated, withdrawn)

    if withdrawn == allocated:
        assert status is SalaryStatus.EXHAUSTED
    elif withdrawn > 0:
        assert status is SalaryStatus.PARTIAL
    else:
        assert status is SalaryStatus.ALLOCATED


@settings(max_examples=200)
@given(ops=operations)
def test_balance_never_negative(ops):
    """Withdrawals above the available balance are refused; totals only grow."""
    allocated = withdrawn = Decimal("0")

    for kind, amount in ops:
        previous = (allocated, withdrawn)
        if kind == "allocate":
            allocated += amount
        elif amount <= available_balance(allocated, withdrawn):
            withdrawn += amount

        assert allocated >= previous[0]
        assert withdrawn >= previous[1]
        assert available_balance(allocated, withdrawn) >= 0

    status = classify_balance(allocated, withdrawn)
    if allocated == 0:
        assert status is SalaryStatus.PENDING
    elif available_balance(allocated, withdrawn) == 0:
        assert status is SalaryStatus.EXHAUSTED


@given(method=st.sampled_from(list(PaymentMethod)), data=st.data())
def test_charges_split_gross_amount(method, data):
    amount = data.draw(
        st.decimals(
            min_value=MINIMUM_WITHDRAWAL[method],
            max_value=Decimal("100000000"),
            places=2,
        )
    )
    breakdown = charge_breakdown(amount, method)

    assert breakdown.charges + breakdown.net_amount == amount
    assert breakdown.charges > 0
    if method is PaymentMethod.BANK_TRANSFER:
        assert breakdown.charges == Decimal("10000")
    else:
        assert breakdown.charges in (Decimal("1500"), Decimal("5000"))
