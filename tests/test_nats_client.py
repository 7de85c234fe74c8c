"""Tests for the NATS message bus client."""

from unittest.mock import AsyncMock

import pytest

from lp_tracker.adapters.messaging.nats_client import NATSMessageBusClient


@pytest.fixture
def connected_client():
    """Client with a mocked NATS connection."""
    client = NATSMessageBusClient(servers="nats://localhost:4222")
    client._client = AsyncMock()
    client._client.subscribe.side_effect = lambda subject, queue, cb: AsyncMock(name=subject)
    client._connected = True
    return client


class TestNATSMessageBusClient:
    """Test cases for NATSMessageBusClient subscriptions."""

    @pytest.mark.asyncio
    async def test_subscribe_uses_queue_group(self, connected_client):
        """Test that subscriptions join the given queue group."""
        handler = AsyncMock()

        await connected_client.subscribe("lp_tracker.commands", handler, queue="lp_tracker")

        call = connected_client._client.subscribe.call_args
        assert call.args == ("lp_tracker.commands",)
        assert call.kwargs["queue"] == "lp_tracker"

    @pytest.mark.asyncio
    async def test_unsubscribe_drains_only_that_subject(self, connected_client):
        """Test that unsubscribing drains the matching subscription."""
        await connected_client.subscribe("lp_tracker.commands", AsyncMock())
        await connected_client.subscribe("lp_tracker.stats", AsyncMock())
        commands_sub = connected_client._subscriptions["lp_tracker.commands"]
        stats_sub = connected_client._subscriptions["lp_tracker.stats"]

        await connected_client.unsubscribe("lp_tracker.commands")

        commands_sub.drain.assert_awaited_once()
        stats_sub.drain.assert_not_awaited()
        assert list(connected_client._subscriptions) == ["lp_tracker.stats"]

    @pytest.mark.asyncio
    async def test_unsubscribe_unknown_subject_is_a_no_op(self, connected_client):
        """Test that unsubscribing twice is harmless."""
        await connected_client.subscribe("lp_tracker.commands", AsyncMock())

        await connected_client.unsubscribe("lp_tracker.commands")
        await connected_client.unsubscribe("lp_tracker.commands")

        assert connected_client._subscriptions == {}

    @pytest.mark.asyncio
    async def test_handler_errors_are_contained(self, connected_client):
        """Test that a failing handler does not break the subscription callback."""
        handler = AsyncMock(side_effect=RuntimeError("boom"))
        await connected_client.subscribe("lp_tracker.commands", handler)
        callback = connected_client._client.subscribe.call_args.kwargs["cb"]

        await callback(object())

        handler.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_disconnect_drains_connection(self, connected_client):
        """Test that disconnecting drains the connection and forgets subscriptions."""
        nats_connection = connected_client._client
        await connected_client.subscribe("lp_tracker.commands", AsyncMock())

        await connected_client.disconnect()

        nats_connection.drain.assert_awaited_once()
        assert connected_client._subscriptions == {}
        assert not await connected_client.is_connected()
