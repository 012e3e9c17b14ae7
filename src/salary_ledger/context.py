"""Request-scoped context carrying the acting admin's identity."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4

SYSTEM_ACTOR = "system"


@dataclass(frozen=True)
class RequestContext:
    """Identity of whoever triggered a ledger operation.

    Passed explicitly into every service call; services never read ambient
    session state.
    """

    actor_id: str
    request_id: str = field(default_factory=lambda: uuid4().hex)

    def __post_init__(self) -> None:
        if not self.actor_id or not self.actor_id.strip():
            raise ValueError("actor_id is required")

    @classmethod
    def system(cls) -> RequestContext:
        """Context for scheduled jobs with no human actor."""
        return cls(actor_id=SYSTEM_ACTOR)

    @property
    def is_system(self) -> bool:
        return self.actor_id == SYSTEM_ACTOR
