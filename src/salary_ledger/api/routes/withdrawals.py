"""Salary withdrawal API endpoints."""

from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query, status
from sqlalchemy import func, select

from salary_ledger.api.dependencies import Context, DbSession, Notifier
from salary_ledger.api.schemas import (
    ChargePreviewResponse,
    ErrorResponse,
    NotificationOutcomeResponse,
    WithdrawalCreate,
    WithdrawalListResponse,
    WithdrawalResponse,
    WithdrawalResultResponse,
    WithdrawalStatusUpdate,
)
from salary_ledger.models import SalaryWithdrawal
from salary_ledger.services.withdrawal_charges import PaymentMethod, charge_breakdown
from salary_ledger.services.withdrawal_service import WithdrawalResult, WithdrawalService

router = APIRouter(prefix="/withdrawals", tags=["withdrawals"])


def _result_response(result: WithdrawalResult) -> WithdrawalResultResponse:
    return WithdrawalResultResponse(
        withdrawal=WithdrawalResponse.model_validate(result.withdrawal),
        available_balance=result.available_balance,
        salary_status=result.salary_status,
        notifications=[
            NotificationOutcomeResponse.model_validate(o) for o in result.notifications
        ],
    )


@router.get(
    "/charges",
    response_model=ChargePreviewResponse,
    responses={400: {"model": ErrorResponse}},
)
async def preview_charges(
    amount: Annotated[Decimal, Query(gt=0, max_digits=14, decimal_places=2)],
    payment_method: str,
) -> ChargePreviewResponse:
    """Preview the charges for a withdrawal."""
    try:
        method = PaymentMethod(payment_method)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown payment method '{payment_method}'",
        )
    return ChargePreviewResponse.model_validate(charge_breakdown(amount, method))


@router.post(
    "",
    response_model=WithdrawalResultResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def request_withdrawal(
    db: DbSession,
    ctx: Context,
    notifier: Notifier,
    payload: WithdrawalCreate,
) -> WithdrawalResultResponse:
    """Withdraw from an employee's available balance."""
    result = await WithdrawalService(db, notifier).request_withdrawal(
        ctx,
        employee_id=payload.employee_id,
        amount=payload.amount,
        payment_method=payload.payment_method,
        destination=payload.destination,
    )
    return _result_response(result)


@router.get("", response_model=WithdrawalListResponse)
async def list_withdrawals(
    db: DbSession,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    employee_id: UUID | None = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> WithdrawalListResponse:
    """List withdrawals, newest first."""
    query = select(SalaryWithdrawal)
    if status_filter:
        query = query.where(SalaryWithdrawal.status == status_filter)
    if employee_id:
        query = query.where(SalaryWithdrawal.employee_id == employee_id)

    count_query = select(func.count()).select_from(query.subquery())
    total = await db.scalar(count_query) or 0

    result = await db.execute(query.order_by(SalaryWithdrawal.created_at.desc()).limit(limit))
    return WithdrawalListResponse(
        items=[WithdrawalResponse.model_validate(w) for w in result.scalars().all()],
        total=total,
    )


@router.post(
    "/{withdrawal_id}/status",
    response_model=WithdrawalResultResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_withdrawal_status(
    db: DbSession,
    ctx: Context,
    notifier: Notifier,
    withdrawal_id: Annotated[UUID, Path()],
    payload: WithdrawalStatusUpdate,
) -> WithdrawalResultResponse:
    """Move a withdrawal to a new status."""
    result = await WithdrawalService(db, notifier).update_status(
        withdrawal_id,
        payload.status,
        failure_reason=payload.failure_reason,
    )
    return _result_response(result)
