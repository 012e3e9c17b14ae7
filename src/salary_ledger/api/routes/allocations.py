"""Salary balance and allocation API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from salary_ledger.api.dependencies import Context, DbSession, Notifier
from salary_ledger.api.schemas import (
    AllocationCreate,
    AllocationRecordListResponse,
    AllocationRecordResponse,
    AllocationResponse,
    BulkAllocationResponse,
    EmployeeBalanceListResponse,
    EmployeeBalanceResponse,
    ErrorResponse,
    NotificationOutcomeResponse,
)
from salary_ledger.models import Employee, SalaryAllocation
from salary_ledger.services.allocation_service import AllocationService

router = APIRouter(tags=["salaries"])


# ============================================================================
# Balances
# ============================================================================


@router.get("/salaries", response_model=EmployeeBalanceListResponse)
async def list_balances(
    db: DbSession,
    salary_status: Annotated[str | None, Query(alias="status")] = None,
    department: str | None = None,
) -> EmployeeBalanceListResponse:
    """List employee salary balances."""
    query = select(Employee)
    if salary_status:
        query = query.where(Employee.salary_status == salary_status)
    if department:
        query = query.where(Employee.department == department)

    result = await db.execute(query.order_by(Employee.first_name, Employee.last_name))
    employees = result.scalars().all()
    return EmployeeBalanceListResponse(
        items=[EmployeeBalanceResponse.model_validate(e) for e in employees],
        total=len(employees),
    )


@router.get(
    "/employees/{employee_id}/balance",
    response_model=EmployeeBalanceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_balance(
    db: DbSession,
    employee_id: Annotated[UUID, Path()],
) -> EmployeeBalanceResponse:
    """Get one employee's salary balance."""
    employee = await AllocationService(db).get_employee(employee_id)
    return EmployeeBalanceResponse.model_validate(employee)


# ============================================================================
# Allocations
# ============================================================================


@router.post(
    "/allocations",
    response_model=AllocationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_allocation(
    db: DbSession,
    ctx: Context,
    notifier: Notifier,
    payload: AllocationCreate,
) -> AllocationResponse:
    """Allocate funds to one employee for the current period."""
    result = await AllocationService(db, notifier).allocate(
        ctx,
        employee_id=payload.employee_id,
        amount=payload.amount,
        allocation_type=payload.allocation_type,
        notes=payload.notes,
    )
    return AllocationResponse(
        allocation_id=result.allocation_id,
        employee_id=result.employee_id,
        period=result.period,
        allocation_type=result.allocation_type,
        amount=result.amount,
        ledger_amount=result.ledger_amount,
        is_new=result.is_new,
        period_allocated_amount=result.period_allocated_amount,
        withdrawn_amount=result.withdrawn_amount,
        available_balance=result.available_balance,
        salary_status=result.salary_status,
        partial_success=result.partial_success,
        notifications=[
            NotificationOutcomeResponse.model_validate(o) for o in result.notifications
        ],
    )


@router.post(
    "/allocations/monthly",
    response_model=BulkAllocationResponse,
    status_code=status.HTTP_200_OK,
)
async def allocate_monthly_salaries(
    db: DbSession,
    ctx: Context,
    notifier: Notifier,
) -> BulkAllocationResponse:
    """Allocate monthly salaries to all active employees not yet allocated this period."""
    result = await AllocationService(db, notifier).allocate_monthly_salaries(ctx)
    return BulkAllocationResponse(
        period=result.period,
        employees_updated=result.employees_updated,
        total_allocated=result.total_allocated,
        skipped_employee_ids=list(result.skipped_employee_ids),
        notification_failures=result.notification_failures,
        job_run_id=result.job_run_id,
    )


@router.get("/allocations", response_model=AllocationRecordListResponse)
async def list_allocations(
    db: DbSession,
    period: str | None = None,
    allocation_type: str | None = None,
    employee_id: UUID | None = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 20,
) -> AllocationRecordListResponse:
    """List recent allocation ledger rows, newest first."""
    query = select(SalaryAllocation)
    if period:
        query = query.where(SalaryAllocation.period == period)
    if allocation_type:
        query = query.where(SalaryAllocation.allocation_type == allocation_type)
    if employee_id:
        query = query.where(SalaryAllocation.employee_id == employee_id)

    count_query = select(func.count()).select_from(query.subquery())
    total = await db.scalar(count_query) or 0

    query = (
        query.options(selectinload(SalaryAllocation.employee))
        .order_by(SalaryAllocation.allocation_date.desc())
        .limit(limit)
    )
    result = await db.execute(query)
    rows = result.scalars().all()

    items = []
    for row in rows:
        item = AllocationRecordResponse.model_validate(row)
        item.employee_name = row.employee.full_name
        items.append(item)
    return AllocationRecordListResponse(items=items, total=total)
