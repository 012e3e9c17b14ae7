"""Tests for the withdrawal fee schedule."""

from decimal import Decimal

import pytest

from salary_ledger.services.withdrawal_charges import (
    PaymentMethod,
    calculate_charges,
    charge_breakdown,
    validate_minimum,
)


class TestCalculateCharges:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            ("1000", "1500"),
            ("105000", "1500"),
            ("105001", "5000"),
            ("999", "0"),
        ],
    )
    def test_mobile_money_bands(self, amount, expected):
        assert calculate_charges(Decimal(amount), PaymentMethod.MOBILE_MONEY) == Decimal(expected)

    def test_bank_transfer_is_flat(self):
        assert calculate_charges(Decimal("20000"), PaymentMethod.BANK_TRANSFER) == Decimal("10000")
        assert calculate_charges(Decimal("5000000"), PaymentMethod.BANK_TRANSFER) == Decimal("10000")


class TestValidateMinimum:
    def test_bank_transfer_minimum(self):
        errors = validate_minimum(Decimal("19999"), PaymentMethod.BANK_TRANSFER)
        assert errors == ["Minimum withdrawal amount for bank transfer is 20,000"]
        assert validate_minimum(Decimal("20000"), PaymentMethod.BANK_TRANSFER) == []

    def test_mobile_money_minimum(self):
        assert validate_minimum(Decimal("999"), PaymentMethod.MOBILE_MONEY)
        assert validate_minimum(Decimal("1000"), PaymentMethod.MOBILE_MONEY) == []


def test_charge_breakdown():
    breakdown = charge_breakdown(Decimal("300000"), PaymentMethod.MOBILE_MONEY)
    assert breakdown.gross_amount == Decimal("300000")
    assert breakdown.charges == Decimal("5000")
    assert breakdown.net_amount == Decimal("295000")
    assert breakdown.description == "Mobile Money fee (above 105K)"
