"""Employee notification dispatch.

Gateways deliver a text message on one channel (SMS, WhatsApp, email). The
dispatcher fans a message out to every gateway. Failures are isolated: a
gateway that raises or returns False is logged and reported, never propagated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class NotificationGateway(Protocol):
    """Protocol for channel gateways."""

    channel: str

    async def send_message(self, recipient: str, text: str) -> bool:
        """Deliver `text` to `recipient`; True on success."""
        ...


@dataclass(frozen=True)
class NotificationOutcome:
    """Result of one delivery attempt on one channel."""

    channel: str
    recipient: str | None
    success: bool
    error: str | None = None


class LogNotificationGateway:
    """Gateway that only writes messages to the log.

    Default when no real channel is configured.
    """

    channel = "log"

    async def send_message(self, recipient: str, text: str) -> bool:
        logger.info("Notification to %s: %s", recipient, text)
        return True


class NotificationDispatcher:
    """Sends a message through every configured gateway."""

    def __init__(self, gateways: list[NotificationGateway] | None = None) -> None:
        self.gateways: list[NotificationGateway] = (
            list(gateways) if gateways is not None else [LogNotificationGateway()]
        )

    async def notify(self, recipient: str | None, text: str) -> list[NotificationOutcome]:
        """Send to all channels and return one outcome per channel."""
        outcomes: list[NotificationOutcome] = []

        for gateway in self.gateways:
            if not recipient:
                outcomes.append(
                    NotificationOutcome(
                        channel=gateway.channel,
                        recipient=None,
                        success=False,
                        error="missing recipient",
                    )
                )
                continue

            try:
                delivered = await gateway.send_message(recipient, text)
            except Exception as e:
                logger.exception(
                    "Gateway %s failed sending to %s",
                    gateway.channel,
                    recipient,
                )
                outcomes.append(
                    NotificationOutcome(
                        channel=gateway.channel,
                        recipient=recipient,
                        success=False,
                        error=str(e) or type(e).__name__,
                    )
                )
                continue

            if not delivered:
                logger.warning("Gateway %s rejected message to %s", gateway.channel, recipient)
            outcomes.append(
                NotificationOutcome(
                    channel=gateway.channel,
                    recipient=recipient,
                    success=bool(delivered),
                    error=None if delivered else "delivery rejected",
                )
            )

        return outcomes


def all_delivered(outcomes: list[NotificationOutcome]) -> bool:
    """True when every channel succeeded."""
    return all(o.success for o in outcomes)
