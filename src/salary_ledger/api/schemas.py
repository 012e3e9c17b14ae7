"""Pydantic schemas for API request/response models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Common schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str


class NotificationOutcomeResponse(BaseModel):
    """Delivery result on one channel."""

    model_config = ConfigDict(from_attributes=True)

    channel: str
    recipient: str | None = None
    success: bool
    error: str | None = None


# ============================================================================
# Balance schemas
# ============================================================================


class EmployeeBalanceResponse(BaseModel):
    """Employee salary balance."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: UUID
    employee_number: str
    full_name: str
    department: str | None = None
    position: str | None = None
    status: str
    monthly_salary: Decimal
    period_allocated_amount: Decimal
    withdrawn_amount: Decimal
    available_balance: Decimal
    current_period: str | None = None
    last_salary_reset: datetime | None = None
    salary_status: str


class EmployeeBalanceListResponse(BaseModel):
    """Schema for listing balances."""

    items: list[EmployeeBalanceResponse]
    total: int


# ============================================================================
# Allocation schemas
# ============================================================================


class AllocationCreate(BaseModel):
    """Schema for allocating to a single employee."""

    employee_id: UUID
    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2)
    allocation_type: str = "monthly"
    notes: str | None = Field(default=None, max_length=2000)


class AllocationResponse(BaseModel):
    """Result of a single allocation."""

    allocation_id: UUID
    employee_id: UUID
    period: str
    allocation_type: str
    amount: Decimal
    ledger_amount: Decimal
    is_new: bool
    period_allocated_amount: Decimal
    withdrawn_amount: Decimal
    available_balance: Decimal
    salary_status: str
    partial_success: bool
    notifications: list[NotificationOutcomeResponse]


class BulkAllocationResponse(BaseModel):
    """Result of a bulk monthly allocation."""

    period: str
    employees_updated: int
    total_allocated: Decimal
    skipped_employee_ids: list[UUID]
    notification_failures: list[UUID]
    job_run_id: UUID


class AllocationRecordResponse(BaseModel):
    """Allocation ledger row."""

    model_config = ConfigDict(from_attributes=True)

    allocation_id: UUID
    employee_id: UUID
    employee_name: str | None = None
    period: str
    allocated_amount: Decimal
    allocation_type: str
    allocated_by: str
    notes: str | None = None
    allocation_date: datetime


class AllocationRecordListResponse(BaseModel):
    """Schema for listing ledger rows."""

    items: list[AllocationRecordResponse]
    total: int


# ============================================================================
# Withdrawal schemas
# ============================================================================


class WithdrawalCreate(BaseModel):
    """Schema for requesting a withdrawal."""

    employee_id: UUID
    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2)
    payment_method: str
    destination: str | None = Field(default=None, max_length=64)


class WithdrawalStatusUpdate(BaseModel):
    """Schema for a withdrawal status change."""

    status: str
    failure_reason: str | None = None


class WithdrawalResponse(BaseModel):
    """Withdrawal record."""

    model_config = ConfigDict(from_attributes=True)

    withdrawal_id: UUID
    employee_id: UUID
    amount: Decimal
    charges: Decimal
    net_amount: Decimal
    payment_method: str
    destination: str | None = None
    reference: str
    status: str
    failure_reason: str | None = None
    requested_by: str
    processed_at: datetime | None = None


class WithdrawalResultResponse(BaseModel):
    """Withdrawal plus the employee's resulting balance."""

    withdrawal: WithdrawalResponse
    available_balance: Decimal
    salary_status: str
    notifications: list[NotificationOutcomeResponse]


class WithdrawalListResponse(BaseModel):
    """Schema for listing withdrawals."""

    items: list[WithdrawalResponse]
    total: int


class ChargePreviewResponse(BaseModel):
    """Charge breakdown preview."""

    model_config = ConfigDict(from_attributes=True)

    gross_amount: Decimal
    charges: Decimal
    net_amount: Decimal
    description: str


# ============================================================================
# Job run schemas
# ============================================================================


class JobRunResponse(BaseModel):
    """Bulk allocation job run."""

    model_config = ConfigDict(from_attributes=True)

    job_run_id: UUID
    job_name: str
    period: str
    status: str
    message: str | None = None
    employees_updated: int
    total_allocated: Decimal
    execution_seconds: float
    triggered_by: str
    created_at: datetime


class JobRunListResponse(BaseModel):
    items: list[JobRunResponse]
