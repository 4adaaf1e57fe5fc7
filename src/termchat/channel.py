"""Ordered, unbounded, broadcast message channel.

Producers call :meth:`MessageChannel.offer`; consumers iterate a
:class:`Subscription`::

    channel = MessageChannel()
    subscription = channel.subscribe()
    channel.offer(Message.create(Role.USER, "hi"))
    channel.shutdown()
    async for message in subscription:
        ...
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterator
from enum import Enum
import logging

from .exceptions import ChannelClosedError
from .models import Message

LOGGER = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 256


class ChannelState(str, Enum):
    """Lifecycle of a channel. ``CLOSED`` is terminal."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class Subscription:
    """One consumer's FIFO view of the channel.

    Iteration yields every message offered to the channel (after the
    subscription point) exactly once, and stops after the channel is closed
    and the buffered messages are drained.
    """

    def __init__(self, channel: MessageChannel, backlog: list[Message]) -> None:
        self._channel = channel
        self._pending: deque[Message] = deque(backlog)
        self._closed = False
        self._wakeup = asyncio.Event()
        if self._pending:
            self._wakeup.set()

    def _push(self, message: Message) -> None:
        self._pending.append(message)
        self._wakeup.set()

    def _notify_closed(self) -> None:
        self._wakeup.set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def __aiter__(self) -> AsyncIterator[Message]:
        return self

    async def __anext__(self) -> Message:
        while not self._pending:
            if self._closed or self._channel.closed:
                self._channel._detach(self)
                raise StopAsyncIteration
            self._wakeup.clear()
            await self._wakeup.wait()
        return self._pending.popleft()

    def close(self) -> None:
        """Stop receiving messages; already buffered messages are discarded."""
        self._closed = True
        self._pending.clear()
        self._channel._detach(self)
        self._wakeup.set()


class MessageChannel:
    """Multi-producer channel delivering messages to every subscriber in order.

    Only the most recent ``history_limit`` messages are kept for replay to
    late subscribers; live subscribers buffer their own undelivered messages.
    """

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if history_limit < 0:
            raise ValueError("history_limit must not be negative.")
        self._state = ChannelState.OPEN
        self._history: deque[Message] = deque(maxlen=history_limit)
        self._offered = 0
        self._subscribers: list[Subscription] = []

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is ChannelState.CLOSED

    @property
    def history(self) -> tuple[Message, ...]:
        """Return the retained replay window, oldest first."""
        return tuple(self._history)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def __len__(self) -> int:
        """Number of messages offered over the channel's lifetime."""
        return self._offered

    def offer(self, message: Message) -> None:
        """Append a message. Never blocks; fails only after shutdown."""
        if self.closed:
            raise ChannelClosedError(
                f"cannot offer {message.role.value} message: channel is closed"
            )
        # No awaits below: the append and fan-out are atomic on the event loop.
        self._history.append(message)
        self._offered += 1
        for subscription in self._subscribers:
            subscription._push(message)
        LOGGER.debug(
            "channel.offer",
            extra={
                "event": "channel.offer",
                "role": message.role.value,
                "message_id": message.id,
            },
        )

    def subscribe(self, replay: bool = True) -> Subscription:
        """Attach a consumer, replaying prior messages unless ``replay`` is False."""
        subscription = Subscription(self, list(self._history) if replay else [])
        if self.closed:
            subscription._notify_closed()
        else:
            self._subscribers.append(subscription)
        return subscription

    def shutdown(self) -> None:
        """Close the channel. Subscribers finish after draining. Idempotent."""
        if self.closed:
            return
        self._state = ChannelState.CLOSED
        for subscription in list(self._subscribers):
            subscription._notify_closed()
        LOGGER.info(
            "channel.shutdown",
            extra={"event": "channel.shutdown", "delivered": self._offered},
        )

    def _detach(self, subscription: Subscription) -> None:
        try:
            self._subscribers.remove(subscription)
        except ValueError:
            pass
