"""Withdrawal state machine with transition validation."""

from __future__ import annotations

from enum import Enum

from salary_ledger.errors import InvalidTransitionError


def _value(status: str) -> str:
    return status.value if isinstance(status, Enum) else status


class WithdrawalStatus(str, Enum):
    """Withdrawal status values."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class WithdrawalStateMachine:
    """State machine for withdrawal status transitions.

    Allowed transitions:
    - pending → processing
    - pending → completed
    - pending → failed
    - pending → cancelled
    - processing → completed
    - processing → failed
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        WithdrawalStatus.PENDING.value: [
            WithdrawalStatus.PROCESSING.value,
            WithdrawalStatus.COMPLETED.value,
            WithdrawalStatus.FAILED.value,
            WithdrawalStatus.CANCELLED.value,
        ],
        WithdrawalStatus.PROCESSING.value: [
            WithdrawalStatus.COMPLETED.value,
            WithdrawalStatus.FAILED.value,
        ],
        WithdrawalStatus.COMPLETED.value: [],  # Terminal
        WithdrawalStatus.FAILED.value: [],  # Terminal
        WithdrawalStatus.CANCELLED.value: [],  # Terminal
    }

    TERMINAL = {
        WithdrawalStatus.COMPLETED.value,
        WithdrawalStatus.FAILED.value,
        WithdrawalStatus.CANCELLED.value,
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(_value(from_status), [])
        return _value(to_status) in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        from_status, to_status = _value(from_status), _value(to_status)
        if from_status in cls.TERMINAL:
            raise InvalidTransitionError(from_status, to_status, "withdrawal is final")
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return _value(status) in cls.TERMINAL

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(_value(current_status), [])
