"""Salary ledger command line interface.

Provides operational tools for:
- The scheduled monthly salary allocation
- One-off allocations
- Balance queries
- Job run history

Usage:
    python -m salary_ledger.cli run-monthly
    python -m salary_ledger.cli run-monthly --force --admin-id 17
    python -m salary_ledger.cli allocate --employee-id X --amount 50000 --type bonus --admin-id 17
    python -m salary_ledger.cli balance --employee-id X
    python -m salary_ledger.cli jobs --limit 10
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Awaitable, Callable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from salary_ledger.config import configure_logging, get_settings
from salary_ledger.context import RequestContext
from salary_ledger.database import dispose_db, init_db
from salary_ledger.errors import SalaryLedgerError
from salary_ledger.services.allocation_service import AllocationService
from salary_ledger.services.periods import is_allocation_day, now_utc
from salary_ledger.services.salary_status import AllocationType

logger = logging.getLogger(__name__)


def parse_uuid(s: str) -> UUID:
    """Parse UUID string."""
    return UUID(s)


def parse_decimal(s: str) -> Decimal:
    """Parse a decimal amount."""
    try:
        value = Decimal(s)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid amount: {s}") from None
    if not value.is_finite():
        raise argparse.ArgumentTypeError(f"amount must be finite: {s}")
    return value


def _json_default(value: Any) -> str:
    if isinstance(value, (Decimal, UUID, datetime)):
        return str(value)
    raise TypeError(f"Cannot serialize {type(value).__name__}")


SessionFactory = Callable[[], AsyncSession]


class LedgerCli:
    """Salary ledger command line interface."""

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self.parser = self._build_parser()
        self._session_factory = session_factory

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m salary_ledger.cli",
            description="Salary ledger operational tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # run-monthly command
        run_monthly = subparsers.add_parser(
            "run-monthly",
            help="Allocate monthly salaries (only on the configured allocation day)",
        )
        run_monthly.add_argument(
            "--force",
            action="store_true",
            help="Run even if today is not the allocation day",
        )
        run_monthly.add_argument(
            "--admin-id",
            type=str,
            help="Acting admin (default: system)",
        )

        # allocate command
        allocate = subparsers.add_parser("allocate", help="Allocate to one employee")
        allocate.add_argument("--employee-id", type=parse_uuid, required=True)
        allocate.add_argument("--amount", type=parse_decimal, required=True)
        allocate.add_argument(
            "--type",
            dest="allocation_type",
            choices=[t.value for t in AllocationType],
            default=AllocationType.MONTHLY.value,
        )
        allocate.add_argument("--notes", type=str)
        allocate.add_argument("--admin-id", type=str, required=True)

        # balance command
        balance = subparsers.add_parser("balance", help="Show an employee's balance")
        balance.add_argument("--employee-id", type=parse_uuid, required=True)

        # jobs command
        jobs = subparsers.add_parser("jobs", help="Show recent monthly allocation runs")
        jobs.add_argument(
            "--limit",
            type=int,
            default=5,
            help="Maximum runs to show (default: 5)",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run CLI with arguments."""
        return asyncio.run(self.run_async(args))

    async def run_async(self, args: list[str] | None = None) -> int:
        """Run CLI with arguments inside an existing event loop."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        commands: dict[str, Callable[[AsyncSession, argparse.Namespace], Awaitable[int]]] = {
            "run-monthly": self._cmd_run_monthly,
            "allocate": self._cmd_allocate,
            "balance": self._cmd_balance,
            "jobs": self._cmd_jobs,
        }
        return await self._run_with_session(commands[parsed.command], parsed)

    async def _run_with_session(
        self,
        handler: Callable[[AsyncSession, argparse.Namespace], Awaitable[int]],
        args: argparse.Namespace,
    ) -> int:
        owns_engine = self._session_factory is None
        factory = self._session_factory or init_db()[1]
        try:
            async with factory() as session:
                return await handler(session, args)
        except SalaryLedgerError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        finally:
            if owns_engine:
                await dispose_db()

    async def _cmd_run_monthly(self, session: AsyncSession, args: argparse.Namespace) -> int:
        """Run the bulk allocator on the allocation day."""
        ctx = RequestContext(actor_id=args.admin_id) if args.admin_id else RequestContext.system()
        service = AllocationService(session)
        now = now_utc()
        day = get_settings().monthly_allocation_day

        if not args.force and not is_allocation_day(day, now):
            reason = f"Not the allocation day (day {day}). Skipping salary allocation."
            logger.info(reason)
            await service.record_skipped_run(ctx, reason=reason, now=now)
            print(reason)
            return 0

        result = await service.allocate_monthly_salaries(ctx, now=now)
        print(
            json.dumps(
                {
                    "period": result.period,
                    "employees_updated": result.employees_updated,
                    "skipped": len(result.skipped_employee_ids),
                    "total_allocated": result.total_allocated,
                    "notification_failures": result.notification_failures,
                },
                default=_json_default,
                indent=2,
            )
        )
        return 0

    async def _cmd_allocate(self, session: AsyncSession, args: argparse.Namespace) -> int:
        """Allocate to one employee."""
        result = await AllocationService(session).allocate(
            RequestContext(actor_id=args.admin_id),
            employee_id=args.employee_id,
            amount=args.amount,
            allocation_type=args.allocation_type,
            notes=args.notes,
        )
        print(
            json.dumps(
                {
                    "allocation_id": result.allocation_id,
                    "period": result.period,
                    "amount": result.amount,
                    "ledger_amount": result.ledger_amount,
                    "available_balance": result.available_balance,
                    "salary_status": result.salary_status,
                    "notified": result.fully_notified,
                },
                default=_json_default,
                indent=2,
            )
        )
        return 0

    async def _cmd_balance(self, session: AsyncSession, args: argparse.Namespace) -> int:
        """Show an employee's balance."""
        employee = await AllocationService(session).get_employee(args.employee_id)
        print(
            json.dumps(
                {
                    "employee_number": employee.employee_number,
                    "name": employee.full_name,
                    "monthly_salary": employee.monthly_salary,
                    "allocated": employee.period_allocated_amount,
                    "withdrawn": employee.withdrawn_amount,
                    "available": employee.available_balance,
                    "current_period": employee.current_period,
                    "salary_status": employee.salary_status,
                },
                default=_json_default,
                indent=2,
            )
        )
        return 0

    async def _cmd_jobs(self, session: AsyncSession, args: argparse.Namespace) -> int:
        """Show recent job runs."""
        runs = await AllocationService(session).recent_job_runs(args.limit)
        for run in runs:
            print(
                json.dumps(
                    {
                        "created_at": run.created_at,
                        "period": run.period,
                        "status": run.status,
                        "employees_updated": run.employees_updated,
                        "total_allocated": run.total_allocated,
                        "message": run.message,
                    },
                    default=_json_default,
                )
            )
        return 0


def main() -> int:
    """CLI entry point."""
    configure_logging()
    cli = LedgerCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
