"""Lifecycle event bus for publishing and subscribing to player events."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, ClassVar, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from lavalink_session.domain.shared.constants import EventNames
from lavalink_session.domain.shared.messages import LogTemplates
from lavalink_session.domain.shared.types import (
    NonEmptyStr,
    SessionKey,
    UtcDatetimeField,
    utcnow,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="SessionEvent")
EventHandler = Callable[[T], Awaitable[None]]


class SessionEvent(BaseModel):
    """Base class for all session lifecycle events."""

    model_config = ConfigDict(frozen=True)

    event_name: ClassVar[str] = ""

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: UtcDatetimeField = Field(default_factory=utcnow)
    guild_id: SessionKey


class PlayerCreated(SessionEvent):
    event_name: ClassVar[str] = EventNames.PLAYER_CREATE

    node_id: str
    voice_channel_id: str | None = None
    text_channel_id: str | None = None


class PlayerDestroyed(SessionEvent):
    event_name: ClassVar[str] = EventNames.PLAYER_DESTROY

    node_id: str
    disconnected: bool = True


class EventBus:
    """In-memory pub/sub bus for session events.

    Handlers are called concurrently. Exceptions in handlers are logged
    but do not prevent other handlers from running.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[SessionEvent], list[EventHandler[Any]]] = defaultdict(list)

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("Subscribed handler to: %s", event_type.event_name)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logger.debug("Unsubscribed handler from %s", event_type.event_name)

    async def publish(self, event: SessionEvent) -> None:
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug(LogTemplates.EVENT_NO_HANDLERS, event.event_name)
            return

        logger.debug(LogTemplates.EVENT_PUBLISHING, event.event_name, len(handlers))

        async def safe_call(handler: EventHandler[Any]) -> None:
            try:
                await handler(event)
            except Exception as e:
                logger.exception("Error in handler for %s: %s", event.event_name, e)

        async with asyncio.TaskGroup() as tg:
            for handler in handlers:
                tg.create_task(safe_call(handler))

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        logger.debug("Cleared all event handlers")
