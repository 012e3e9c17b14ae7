"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from salary_ledger.context import RequestContext
from salary_ledger.database import init_db
from salary_ledger.services.notifications import NotificationDispatcher


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, session_factory = init_db()
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_request_context(
    x_admin_id: Annotated[str | None, Header()] = None,
    x_request_id: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Build the request context from the authenticated admin header."""
    if not x_admin_id or not x_admin_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Admin-ID header is required",
        )
    if x_request_id:
        return RequestContext(actor_id=x_admin_id.strip(), request_id=x_request_id)
    return RequestContext(actor_id=x_admin_id.strip())


_dispatcher = NotificationDispatcher()


def get_notifier() -> NotificationDispatcher:
    """Notification dispatcher shared by all requests."""
    return _dispatcher


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Context = Annotated[RequestContext, Depends(get_request_context)]
Notifier = Annotated[NotificationDispatcher, Depends(get_notifier)]
