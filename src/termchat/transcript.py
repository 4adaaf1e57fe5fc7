"""Append-only transcript and the loop that fills it from the channel."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import logging

from .channel import MessageChannel
from .models import Message, Role
from .task_manager import TaskManager

LOGGER = logging.getLogger(__name__)

PROJECTOR_TASK_NAME = "transcript"

AppendCallback = Callable[[Message], Awaitable[None]]


class Transcript:
    """Time-ordered log of delivered messages. Written only by the projector."""

    def __init__(self) -> None:
        self._messages: list[Message] = []

    @property
    def messages(self) -> tuple[Message, ...]:
        """Return a snapshot safe to read while the projector keeps appending."""
        return tuple(self._messages)

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def count(self, role: Role | None = None) -> int:
        if role is None:
            return len(self._messages)
        return sum(1 for message in self._messages if message.role is role)

    def __len__(self) -> int:
        return len(self._messages)


class TranscriptProjector:
    """Drain a channel subscription into a transcript, in arrival order."""

    def __init__(
        self,
        channel: MessageChannel,
        transcript: Transcript,
        on_append: AppendCallback | None = None,
    ) -> None:
        self.channel = channel
        self.transcript = transcript
        self._on_append = on_append
        self._subscription = channel.subscribe()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self) -> None:
        """Append until the channel is closed and drained, or until cancelled."""
        delivered = 0
        try:
            async for message in self._subscription:
                self.transcript.append(message)
                delivered += 1
                if self._on_append is not None:
                    await self._on_append(message)
        except asyncio.CancelledError:
            LOGGER.info(
                "transcript.projector.cancelled",
                extra={"event": "transcript.projector.cancelled", "delivered": delivered},
            )
            raise
        LOGGER.info(
            "transcript.projector.drained",
            extra={"event": "transcript.projector.drained", "delivered": delivered},
        )

    def start(self, task_manager: TaskManager) -> asyncio.Task[None]:
        """Start the drain loop once, registered under a fixed task name."""
        if self._task is None:
            self._task = task_manager.spawn(self.run(), name=PROJECTOR_TASK_NAME)
        return self._task

    async def join(self) -> None:
        """Wait for the drain loop to finish after the channel is shut down."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise
