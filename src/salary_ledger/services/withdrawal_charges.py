"""Withdrawal fee schedule and minimums per payment method."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class PaymentMethod(str, Enum):
    """Supported withdrawal payment methods."""

    MOBILE_MONEY = "mobile_money"
    BANK_TRANSFER = "bank_transfer"


# Mobile money: banded fee
MOBILE_MONEY_BAND_FLOOR = Decimal("1000")
MOBILE_MONEY_BAND_CEILING = Decimal("105000")
MOBILE_MONEY_LOW_FEE = Decimal("1500")
MOBILE_MONEY_HIGH_FEE = Decimal("5000")

# Bank transfer: flat fee
BANK_TRANSFER_FEE = Decimal("10000")

MINIMUM_WITHDRAWAL: dict[PaymentMethod, Decimal] = {
    PaymentMethod.MOBILE_MONEY: Decimal("1000"),
    PaymentMethod.BANK_TRANSFER: Decimal("20000"),
}


@dataclass(frozen=True)
class ChargeBreakdown:
    """Gross amount split into charges and the amount actually paid out."""

    gross_amount: Decimal
    charges: Decimal
    net_amount: Decimal
    description: str


def calculate_charges(amount: Decimal, method: PaymentMethod) -> Decimal:
    """Fee charged for withdrawing `amount` via `method`."""
    if method is PaymentMethod.MOBILE_MONEY:
        if MOBILE_MONEY_BAND_FLOOR <= amount <= MOBILE_MONEY_BAND_CEILING:
            return MOBILE_MONEY_LOW_FEE
        if amount > MOBILE_MONEY_BAND_CEILING:
            return MOBILE_MONEY_HIGH_FEE
        return Decimal("0")
    if method is PaymentMethod.BANK_TRANSFER:
        return BANK_TRANSFER_FEE
    return Decimal("0")


def charge_description(amount: Decimal, method: PaymentMethod) -> str:
    if method is PaymentMethod.MOBILE_MONEY:
        if MOBILE_MONEY_BAND_FLOOR <= amount <= MOBILE_MONEY_BAND_CEILING:
            return "Mobile Money fee (1K - 105K)"
        if amount > MOBILE_MONEY_BAND_CEILING:
            return "Mobile Money fee (above 105K)"
    elif method is PaymentMethod.BANK_TRANSFER:
        return "Bank transfer fee"
    return "Processing fee"


def validate_minimum(amount: Decimal, method: PaymentMethod) -> list[str]:
    """Return error messages (empty if the amount meets the minimum)."""
    minimum = MINIMUM_WITHDRAWAL[method]
    if amount < minimum:
        label = "bank transfer" if method is PaymentMethod.BANK_TRANSFER else "mobile money"
        return [f"Minimum withdrawal amount for {label} is {minimum:,}"]
    return []


def charge_breakdown(amount: Decimal, method: PaymentMethod) -> ChargeBreakdown:
    charges = calculate_charges(amount, method)
    return ChargeBreakdown(
        gross_amount=amount,
        charges=charges,
        net_amount=amount - charges,
        description=charge_description(amount, method),
    )
