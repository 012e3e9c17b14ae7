"""Pytest fixtures for salary ledger tests."""

from __future__ import annotations

import itertools
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from salary_ledger.context import RequestContext
from salary_ledger.database import create_schema, make_session_factory
from salary_ledger.models import Employee
from salary_ledger.services.notifications import NotificationDispatcher

# In-memory SQLite shared across one engine's connections
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Mid-month, mid-day UTC: same calendar month in the portal timezone
MAY_2025 = datetime(2025, 5, 15, 9, 0, tzinfo=timezone.utc)
JUNE_2025 = datetime(2025, 6, 15, 9, 0, tzinfo=timezone.utc)


class RecordingGateway:
    """Gateway that records every message it is asked to send."""

    def __init__(self, channel: str = "sms") -> None:
        self.channel = channel
        self.sent: list[tuple[str, str]] = []

    async def send_message(self, recipient: str, text: str) -> bool:
        self.sent.append((recipient, text))
        return True


class FailingGateway:
    """Gateway whose provider is down."""

    def __init__(self, channel: str = "whatsapp") -> None:
        self.channel = channel
        self.attempts = 0

    async def send_message(self, recipient: str, text: str) -> bool:
        self.attempts += 1
        raise RuntimeError("gateway down")


class RejectingGateway:
    """Gateway that answers but refuses delivery."""

    channel = "email"

    async def send_message(self, recipient: str, text: str) -> bool:
        return False


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(actor_id="admin-1")


@pytest.fixture
def sms() -> RecordingGateway:
    return RecordingGateway("sms")


@pytest.fixture
def notifier(sms: RecordingGateway) -> NotificationDispatcher:
    return NotificationDispatcher([sms])


@pytest.fixture
def make_employee(session: AsyncSession) -> Callable[..., Awaitable[Employee]]:
    """Factory for committed employee records."""
    counter = itertools.count(1)

    async def _make(**overrides: Any) -> Employee:
        n = next(counter)
        data: dict[str, Any] = {
            "employee_number": f"EMP{n:03d}",
            "first_name": f"Worker{n}",
            "last_name": "Test",
            "phone": f"+2567000{n:05d}",
            "department": "Operations",
            "status": "active",
            "monthly_salary": Decimal("1000000"),
        }
        data.update(overrides)
        employee = Employee(**data)
        session.add(employee)
        await session.commit()
        return employee

    return _make
