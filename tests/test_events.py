"""Tests for the lifecycle EventBus."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from lavalink_session.domain.shared.events import EventBus, PlayerCreated, PlayerDestroyed


class TestSessionEvents:
    def test_event_names(self):
        assert PlayerCreated.event_name == "playerCreate"
        assert PlayerDestroyed.event_name == "playerDestroy"

    def test_naive_datetime_rejected(self):
        with pytest.raises(ValidationError):
            PlayerCreated(guild_id="1", node_id="n", occurred_at=datetime(2024, 1, 1))

    def test_events_have_unique_ids(self):
        first = PlayerCreated(guild_id="1", node_id="n")
        second = PlayerCreated(guild_id="1", node_id="n")
        assert first.event_id != second.event_id


class TestEventBus:
    """Unit tests for EventBus publish/subscribe."""

    @pytest.mark.asyncio
    async def test_publish_to_subscribers(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(PlayerCreated, handler)
        event = PlayerCreated(guild_id="1", node_id="n")
        await bus.publish(event)

        assert received == [event]

    @pytest.mark.asyncio
    async def test_handlers_are_scoped_to_event_type(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(PlayerDestroyed, handler)
        await bus.publish(PlayerCreated(guild_id="1", node_id="n"))

        assert received == []

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_block_others(self, caplog):
        bus = EventBus()
        received = []

        async def broken(event):
            raise RuntimeError("boom")

        async def handler(event):
            received.append(event)

        bus.subscribe(PlayerCreated, broken)
        bus.subscribe(PlayerCreated, handler)
        await bus.publish(PlayerCreated(guild_id="1", node_id="n"))

        assert len(received) == 1
        assert "boom" in caplog.text

    @pytest.mark.asyncio
    async def test_unsubscribe_and_clear(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(PlayerCreated, handler)
        bus.unsubscribe(PlayerCreated, handler)
        await bus.publish(PlayerCreated(guild_id="1", node_id="n"))

        bus.subscribe(PlayerCreated, handler)
        bus.clear()
        await bus.publish(PlayerCreated(guild_id="1", node_id="n"))

        assert received == []
