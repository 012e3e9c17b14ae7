"""Tests for notification dispatch."""

from salary_ledger.services.notifications import (
    LogNotificationGateway,
    NotificationDispatcher,
    NotificationGateway,
    all_delivered,
)
from tests.conftest import FailingGateway, RecordingGateway, RejectingGateway


class TestNotificationDispatcher:
    async def test_sends_on_every_channel(self):
        sms, whatsapp = RecordingGateway("sms"), RecordingGateway("whatsapp")
        dispatcher = NotificationDispatcher([sms, whatsapp])

        outcomes = await dispatcher.notify("+256700000001", "hello")

        assert [o.channel for o in outcomes] == ["sms", "whatsapp"]
        assert all_delivered(outcomes)
        assert sms.sent == [("+256700000001", "hello")]
        assert whatsapp.sent == [("+256700000001", "hello")]

    async def test_failing_gateway_is_isolated(self, caplog):
        sms, broken = RecordingGateway("sms"), FailingGateway("whatsapp")
        dispatcher = NotificationDispatcher([broken, sms])

        outcomes = await dispatcher.notify("+256700000001", "hello")

        by_channel = {o.channel: o for o in outcomes}
        assert by_channel["whatsapp"].success is False
        assert by_channel["whatsapp"].error == "gateway down"
        assert by_channel["sms"].success is True
        assert sms.sent  # later channel still ran
        assert "Gateway whatsapp failed" in caplog.text

    async def test_rejected_delivery_reported(self):
        outcomes = await NotificationDispatcher([RejectingGateway()]).notify("a@b.c", "hi")
        assert outcomes[0].success is False
        assert outcomes[0].error == "delivery rejected"
        assert not all_delivered(outcomes)

    async def test_missing_recipient_skips_gateway(self):
        sms = RecordingGateway("sms")
        outcomes = await NotificationDispatcher([sms]).notify(None, "hello")

        assert outcomes[0].success is False
        assert outcomes[0].error == "missing recipient"
        assert sms.sent == []

    async def test_default_gateway_logs(self, caplog):
        caplog.set_level("INFO")
        dispatcher = NotificationDispatcher()

        outcomes = await dispatcher.notify("+256700000001", "balance updated")

        assert outcomes[0].channel == "log"
        assert outcomes[0].success is True
        assert "balance updated" in caplog.text


def test_gateways_satisfy_protocol():
    assert isinstance(LogNotificationGateway(), NotificationGateway)
    assert isinstance(RecordingGateway(), NotificationGateway)
