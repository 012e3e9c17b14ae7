"""Bulk allocation job monitoring endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from salary_ledger.api.dependencies import DbSession
from salary_ledger.api.schemas import JobRunListResponse, JobRunResponse
from salary_ledger.services.allocation_service import AllocationService

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=JobRunListResponse)
async def list_job_runs(
    db: DbSession,
    limit: Annotated[int, Query(ge=1, le=100)] = 5,
) -> JobRunListResponse:
    """Recent monthly allocation job runs, newest first."""
    runs = await AllocationService(db).recent_job_runs(limit)
    return JobRunListResponse(items=[JobRunResponse.model_validate(r) for r in runs])
