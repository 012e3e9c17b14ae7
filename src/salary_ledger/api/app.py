"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salary_ledger import __version__
from salary_ledger.api.routes import (
    allocations_router,
    health_router,
    jobs_router,
    withdrawals_router,
)
from salary_ledger.database import dispose_db, init_db
from salary_ledger.errors import (
    EmployeeNotFoundError,
    InsufficientBalanceError,
    InvalidTransitionError,
    SalaryLedgerError,
    ValidationError,
    WithdrawalNotFoundError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    init_db()
    yield
    await dispose_db()


def _status_for(exc: SalaryLedgerError) -> int:
    if isinstance(exc, (EmployeeNotFoundError, WithdrawalNotFoundError)):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (InsufficientBalanceError, InvalidTransitionError)):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ValidationError):
        return 422
    return status.HTTP_400_BAD_REQUEST


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Salary Ledger API",
        description="Salary allocation and withdrawal ledger for the HR portal",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(SalaryLedgerError)
    async def ledger_exception_handler(
        request: Request, exc: SalaryLedgerError
    ) -> JSONResponse:
        """Map ledger errors to HTTP responses."""
        return JSONResponse(
            status_code=_status_for(exc),
            content={"detail": str(exc), "code": exc.code},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(allocations_router, prefix="/api/v1")
    app.include_router(withdrawals_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
