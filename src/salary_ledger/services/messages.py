"""Text of the messages sent to employees."""

from __future__ import annotations

from decimal import Decimal

from salary_ledger.config import Settings
from salary_ledger.services.periods import period_label


def format_amount(amount: Decimal) -> str:
    """Thousands-separated amount; cents only when present."""
    if amount == amount.to_integral_value():
        return f"{amount:,.0f}"
    return f"{amount:,.2f}"


def allocation_message(
    settings: Settings, first_name: str, amount: Decimal, allocation_type: str
) -> str:
    return (
        f"Hello {first_name}, {settings.currency} {format_amount(amount)} has been allocated "
        f"to your account as {allocation_type.capitalize()}. "
        f"Check {settings.portal_name} for details."
    )


def monthly_allocation_message(
    settings: Settings, first_name: str, amount: Decimal, period: str
) -> str:
    return (
        f"Hello {first_name}, your monthly salary of {settings.currency} "
        f"{format_amount(amount)} has been allocated for {period_label(period)}. "
        f"Check {settings.portal_name} for details."
    )


def withdrawal_message(settings: Settings, net_amount: Decimal, status: str, reason: str | None = None) -> str:
    amount = f"{settings.currency} {format_amount(net_amount)}"
    if status == "completed":
        return f"Your salary withdrawal of {amount} has been completed successfully."
    if status == "failed":
        return f"Your salary withdrawal of {amount} has failed. Reason: {reason or 'unknown error'}"
    if status == "cancelled":
        return f"Your salary withdrawal of {amount} has been cancelled."
    if status == "pending":
        return f"Your salary withdrawal of {amount} has been received and is pending."
    return f"Your salary withdrawal of {amount} is being processed."
