"""Chat session: the owned state behind one interactive run."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Sequence

from .channel import MessageChannel, Subscription
from .conversation import (
    DEFAULT_REPLIES,
    DEFAULT_REPLY_DELAY_SECONDS,
    ConversationEngine,
    Submission,
)
from .events.bus import (
    BUFFER_CHANGED,
    EXIT_REQUESTED,
    MODE_CHANGED,
    TRANSCRIPT_APPENDED,
    EventBus,
)
from .exceptions import ChannelClosedError, CursorOutOfBoundsError, EmptyInputError
from .keys import (
    Action,
    ClearBuffer,
    DeleteBackward,
    Exit,
    InsertChar,
    KeyDispatcher,
    KeyEvent,
    Mode,
    MoveCursor,
    Noop,
    Submit,
    ToggleMode,
)
from .models import Message
from .task_manager import TaskManager
from .telemetry import Telemetry
from .text_buffer import TextBuffer
from .transcript import Transcript, TranscriptProjector

LOGGER = logging.getLogger(__name__)


class ChatSession:
    """Own the buffer, mode, channel, and transcript of a single chat.

    Keystrokes are applied one at a time, in arrival order. Observers learn
    about changes through :attr:`events` rather than shared globals.
    """

    def __init__(
        self,
        *,
        username: str = "User",
        reply_delay: float = DEFAULT_REPLY_DELAY_SECONDS,
        replies: Sequence[str] = DEFAULT_REPLIES,
        telemetry: Telemetry | None = None,
        dispatcher: KeyDispatcher | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.username = username
        self.buffer = TextBuffer()
        self.mode = Mode.NORMAL
        self.events = EventBus()
        self.telemetry = telemetry or Telemetry()
        self.dispatcher = dispatcher or KeyDispatcher()
        self.task_manager = TaskManager()
        self.channel = MessageChannel()
        self.transcript = Transcript()
        self.engine = ConversationEngine(
            self.channel,
            reply_delay=reply_delay,
            replies=replies,
            rng=rng,
            task_manager=self.task_manager,
        )
        self.projector = TranscriptProjector(
            self.channel, self.transcript, on_append=self._on_transcript_append
        )
        self._key_lock = asyncio.Lock()
        self._started = False
        self._shut_down = False

    @property
    def is_awaiting_reply(self) -> bool:
        return self.engine.pending_count > 0

    @property
    def closed(self) -> bool:
        return self._shut_down

    async def start(self) -> None:
        """Start the transcript loop. Calling it twice has no effect."""
        if self._started:
            return
        self._started = True
        self.telemetry.record("chat_initialized")
        self.projector.start(self.task_manager)
        LOGGER.info(
            "session.started",
            extra={"event": "session.started", "username": self.username},
        )

    async def handle_key(self, key: KeyEvent) -> Action:
        """Dispatch a keystroke and apply the resulting action."""
        async with self._key_lock:
            action = self.dispatcher.dispatch(key, self.mode, self.buffer.is_empty())
            try:
                await self._apply(action)
            except CursorOutOfBoundsError:
                LOGGER.critical(
                    "session.buffer.invariant_violated",
                    extra={
                        "event": "session.buffer.invariant_violated",
                        "action": type(action).__name__,
                    },
                    exc_info=True,
                )
                raise
            return action

    async def _apply(self, action: Action) -> None:
        if isinstance(action, Exit):
            await self.events.publish(EXIT_REQUESTED)
        elif isinstance(action, ToggleMode):
            await self.toggle_mode()
        elif isinstance(action, Submit):
            if self.buffer.is_empty():
                # Blank submits are simply not issued.
                return
            self.submit(self.buffer.to_text())
            self.buffer.clear()
            await self._buffer_changed()
        elif isinstance(action, DeleteBackward):
            self.buffer.delete_backward()
            await self._buffer_changed()
        elif isinstance(action, ClearBuffer):
            self.buffer.clear()
            self.telemetry.record("buffer_cleared")
            await self._buffer_changed()
        elif isinstance(action, MoveCursor):
            self.buffer.move_cursor(action.direction)
            await self._buffer_changed()
        elif isinstance(action, InsertChar):
            self.buffer.insert(action.char)
            await self._buffer_changed()
        elif isinstance(action, Noop):
            return

    def submit(self, text: str) -> Submission:
        """Send ``text`` as a user message and schedule the reply.

        Raises :class:`EmptyInputError` for blank text and
        :class:`ChannelClosedError` once the session is shut down.
        """
        if not text.strip():
            raise EmptyInputError("Cannot send an empty message.")
        if self._shut_down:
            raise ChannelClosedError("Cannot send a message: session is shutting down.")
        self.telemetry.record("message_sent", {"length": len(text)})
        return self.engine.submit(text)

    async def insert_text(self, text: str) -> None:
        """Insert pasted text at the cursor; ignored while help is shown."""
        async with self._key_lock:
            if self.mode is Mode.HELP or not text:
                return
            self.buffer.insert_text(text)
            await self._buffer_changed()

    async def toggle_mode(self) -> Mode:
        self.mode = self.mode.toggled()
        self.telemetry.record("mode_toggled", {"mode": self.mode.value})
        await self.events.publish(MODE_CHANGED, {"mode": self.mode})
        return self.mode

    def subscribe(self, replay: bool = True) -> Subscription:
        """Return a live subscription to delivered messages."""
        return self.channel.subscribe(replay=replay)

    async def shutdown(self) -> None:
        """Abandon pending replies, close the channel, and drain the transcript.

        Idempotent.
        """
        if self._shut_down:
            return
        self._shut_down = True
        abandoned = await self.engine.cancel_pending()
        self.channel.shutdown()
        if self._started:
            await self.projector.join()
        await self.task_manager.cancel_all()
        LOGGER.info(
            "session.shutdown",
            extra={
                "event": "session.shutdown",
                "abandoned_replies": abandoned,
                "transcript_length": len(self.transcript),
                "total_events": self.telemetry.get_summary()["total_events"],
            },
        )

    async def _buffer_changed(self) -> None:
        await self.events.publish(
            BUFFER_CHANGED,
            {"text": self.buffer.to_text(), "cursor": self.buffer.cursor},
        )

    async def _on_transcript_append(self, message: Message) -> None:
        await self.events.publish(TRANSCRIPT_APPENDED, {"message": message})
