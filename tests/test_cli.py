"""Tests for the operational CLI."""

import json
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import select

from salary_ledger import cli as cli_module
from salary_ledger.cli import LedgerCli
from salary_ledger.models import Employee, SalaryJobRun
from tests.conftest import MAY_2025

ALLOCATION_DAY = datetime(2025, 5, 30, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def cli(session_factory):
    return LedgerCli(session_factory=session_factory)


class TestRunMonthly:
    async def test_skips_outside_allocation_day(self, cli, session, make_employee, monkeypatch, capsys):
        employee = await make_employee()
        monkeypatch.setattr(cli_module, "now_utc", lambda: MAY_2025)

        code = await cli.run_async(["run-monthly"])

        assert code == 0
        assert "Skipping salary allocation" in capsys.readouterr().out
        allocated = await session.scalar(
            select(Employee.period_allocated_amount).where(
                Employee.employee_id == employee.employee_id
            )
        )
        assert allocated == Decimal("0")
        statuses = (await session.execute(select(SalaryJobRun.status))).scalars().all()
        assert statuses == ["skipped"]

    async def test_runs_on_allocation_day(self, cli, session, make_employee, monkeypatch, capsys):
        await make_employee(monthly_salary=Decimal("400000"))
        await make_employee(monthly_salary=Decimal("600000"))
        monkeypatch.setattr(cli_module, "now_utc", lambda: ALLOCATION_DAY)

        code = await cli.run_async(["run-monthly", "--admin-id", "17"])

        assert code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["period"] == "2025-05"
        assert summary["employees_updated"] == 2
        assert Decimal(summary["total_allocated"]) == Decimal("1000000")
        triggered_by = await session.scalar(select(SalaryJobRun.triggered_by))
        assert triggered_by == "17"

    async def test_force_runs_any_day(self, cli, make_employee, monkeypatch, capsys):
        await make_employee()
        monkeypatch.setattr(cli_module, "now_utc", lambda: MAY_2025)

        code = await cli.run_async(["run-monthly", "--force"])

        assert code == 0
        assert json.loads(capsys.readouterr().out)["employees_updated"] == 1


class TestAllocateAndBalance:
    async def test_allocate_then_balance(self, cli, make_employee, capsys):
        employee = await make_employee(monthly_salary=Decimal("500000"))
        employee_id = str(employee.employee_id)

        code = await cli.run_async(
            [
                "allocate",
                "--employee-id", employee_id,
                "--amount", "75000",
                "--type", "bonus",
                "--admin-id", "17",
            ]
        )
        assert code == 0
        allocation = json.loads(capsys.readouterr().out)
        assert Decimal(allocation["ledger_amount"]) == Decimal("75000")
        assert allocation["salary_status"] == "allocated"

        code = await cli.run_async(["balance", "--employee-id", employee_id])
        assert code == 0
        balance = json.loads(capsys.readouterr().out)
        assert Decimal(balance["available"]) == Decimal("75000")
        assert balance["name"] == employee.full_name

    async def test_over_cap_reports_error(self, cli, make_employee, capsys):
        employee = await make_employee(monthly_salary=Decimal("500000"))

        code = await cli.run_async(
            [
                "allocate",
                "--employee-id", str(employee.employee_id),
                "--amount", "600000",
                "--admin-id", "17",
            ]
        )

        assert code == 1
        assert "monthly salary is only" in capsys.readouterr().err

    async def test_unknown_employee_balance(self, cli, capsys):
        code = await cli.run_async(["balance", "--employee-id", str(uuid4())])

        assert code == 1
        assert capsys.readouterr().err.startswith("Error: Employee")

    def test_invalid_uuid_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            LedgerCli().parser.parse_args(["balance", "--employee-id", "not-a-uuid"])

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", "-Infinity", "12,000"])
    def test_unusable_amount_rejected_by_parser(self, amount):
        with pytest.raises(SystemExit):
            LedgerCli().parser.parse_args(
                ["allocate", "--employee-id", str(uuid4()), "--amount", amount, "--admin-id", "17"]
            )

    async def test_fractional_cents_reports_error(self, cli, make_employee, capsys):
        employee = await make_employee()

        code = await cli.run_async(
            [
                "allocate",
                "--employee-id", str(employee.employee_id),
                "--amount", "100.005",
                "--type", "bonus",
                "--admin-id", "17",
            ]
        )

        assert code == 1
        assert "at most 2 decimal places" in capsys.readouterr().err


async def test_jobs_lists_recent_runs(cli, make_employee, monkeypatch, capsys):
    await make_employee()
    monkeypatch.setattr(cli_module, "now_utc", lambda: ALLOCATION_DAY)
    await cli.run_async(["run-monthly"])
    capsys.readouterr()

    code = await cli.run_async(["jobs", "--limit", "3"])

    assert code == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    run = json.loads(lines[0])
    assert run["status"] == "success"
    assert run["employees_updated"] == 1


def test_no_command_prints_help(capsys):
    code = LedgerCli().run([])

    assert code == 1
    assert "usage:" in capsys.readouterr().out
