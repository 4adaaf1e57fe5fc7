"""Conversation engine: publish user messages and simulated delayed replies."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
import logging
import random

from .channel import MessageChannel
from .exceptions import ChannelClosedError, TermChatError
from .models import Message, Role
from .task_manager import TaskManager

LOGGER = logging.getLogger(__name__)

DEFAULT_REPLY_DELAY_SECONDS = 0.5

DEFAULT_REPLIES: tuple[str, ...] = (
    "That's interesting! Tell me more.",
    "I understand what you mean.",
    "How does that make you feel?",
    "Fascinating perspective!",
    "Could you elaborate on that?",
)


class ReplyState(str, Enum):
    """Progress of a single submission."""

    SUBMITTED = "SUBMITTED"
    AWAITING_REPLY = "AWAITING_REPLY"
    REPLIED = "REPLIED"
    ABANDONED = "ABANDONED"


@dataclass(eq=False)
class Submission:
    """A submitted user message and the task producing its reply."""

    user_message: Message
    state: ReplyState = ReplyState.SUBMITTED
    reply: Message | None = None
    task: asyncio.Task[Message] | None = field(default=None, repr=False)

    async def wait(self) -> Message:
        """Await the assistant reply for this submission."""
        if self.task is None:
            raise TermChatError("submission has no reply task")
        return await self.task


class ConversationEngine:
    """Turn submitted text into a user message followed by a canned reply."""

    def __init__(
        self,
        channel: MessageChannel,
        *,
        reply_delay: float = DEFAULT_REPLY_DELAY_SECONDS,
        replies: Sequence[str] = DEFAULT_REPLIES,
        rng: random.Random | None = None,
        task_manager: TaskManager | None = None,
    ) -> None:
        if not replies:
            raise ValueError("replies must contain at least one candidate.")
        self.channel = channel
        self.reply_delay = max(0.0, reply_delay)
        self.replies: tuple[str, ...] = tuple(replies)
        self._rng = rng or random.Random()
        self._tasks = task_manager or TaskManager()
        self._in_flight: list[Submission] = []

    @property
    def pending_count(self) -> int:
        """Number of submissions still waiting for their reply."""
        return len(self._in_flight)

    @property
    def in_flight(self) -> tuple[Submission, ...]:
        return tuple(self._in_flight)

    def submit(self, content: str) -> Submission:
        """Publish ``content`` as a user message and schedule its reply.

        Emptiness is the caller's concern. Raises :class:`ChannelClosedError`
        when the channel is already shut down; nothing is scheduled then.
        """
        user_message = Message.create(Role.USER, content)
        self.channel.offer(user_message)
        submission = Submission(user_message=user_message)
        submission.state = ReplyState.AWAITING_REPLY
        self._in_flight.append(submission)
        submission.task = self._tasks.spawn(self._reply(submission))
        submission.task.add_done_callback(
            lambda task: self._settle(submission, task)
        )
        LOGGER.info(
            "conversation.submitted",
            extra={
                "event": "conversation.submitted",
                "message_id": user_message.id,
                "length": len(content),
            },
        )
        return submission

    def choose_reply(self) -> str:
        return self._rng.choice(self.replies)

    async def _reply(self, submission: Submission) -> Message:
        await asyncio.sleep(self.reply_delay)
        reply = Message.create(Role.ASSISTANT, self.choose_reply())
        try:
            self.channel.offer(reply)
        except ChannelClosedError:
            LOGGER.info(
                "conversation.reply.dropped",
                extra={
                    "event": "conversation.reply.dropped",
                    "message_id": submission.user_message.id,
                },
            )
            raise
        submission.reply = reply
        submission.state = ReplyState.REPLIED
        self._discard(submission)
        return reply

    def _settle(self, submission: Submission, task: asyncio.Task[Message]) -> None:
        self._discard(submission)
        if task.cancelled() or submission.reply is None:
            submission.state = ReplyState.ABANDONED

    def _discard(self, submission: Submission) -> None:
        if submission in self._in_flight:
            self._in_flight.remove(submission)

    async def cancel_pending(self) -> int:
        """Abandon every outstanding reply; return how many were cancelled."""
        cancelled = await self._tasks.cancel_anonymous()
        if cancelled:
            LOGGER.info(
                "conversation.replies.abandoned",
                extra={"event": "conversation.replies.abandoned", "count": cancelled},
            )
        return cancelled
