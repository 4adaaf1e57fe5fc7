"""Scrollable conversation view widget."""

from __future__ import annotations

from textual.containers import VerticalScroll
from textual.widgets import Static

from ..models import Message
from .message import MessageBubble

EMPTY_TRANSCRIPT_TEXT = "No messages yet. Type something to start!"


class ConversationView(VerticalScroll):
    """A scrollable container that hosts message bubbles."""

    def __init__(
        self,
        *,
        colors: dict[str, str] | None = None,
        show_timestamps: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._colors = dict(colors or {})
        self._show_timestamps = show_timestamps

    def compose(self):  # type: ignore[override]
        yield Static(EMPTY_TRANSCRIPT_TEXT, id="conversation_placeholder")

    async def add_message(self, message: Message) -> MessageBubble:
        """Create, mount, and scroll to a new message bubble."""
        for placeholder in self.query("#conversation_placeholder"):
            await placeholder.remove()
        bubble = MessageBubble(
            message,
            color=self._colors.get(message.role.value, ""),
            show_timestamp=self._show_timestamps,
        )
        await self.mount(bubble)
        self.scroll_end(animate=False)
        return bubble

    @property
    def bubbles(self) -> list[MessageBubble]:
        return list(self.query(MessageBubble))
