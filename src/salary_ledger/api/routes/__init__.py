"""API routes."""

from salary_ledger.api.routes.allocations import router as allocations_router
from salary_ledger.api.routes.health import router as health_router
from salary_ledger.api.routes.jobs import router as jobs_router
from salary_ledger.api.routes.withdrawals import router as withdrawals_router

__all__ = ["allocations_router", "health_router", "jobs_router", "withdrawals_router"]
