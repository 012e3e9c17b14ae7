"""Salary balance ledger for the HR/payroll portal."""

__version__ = "0.1.0"
