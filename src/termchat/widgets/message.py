"""Message bubble widget for transcript rendering."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from rich.text import Text
from textual.widgets import Static

from ..models import Message, Role


class MessageBubble(Static):
    """Render a single chat message with its role label and optional time."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
        margin: 0 0 1 0;
    }
    """

    def __init__(
        self,
        message: Message,
        *,
        color: str = "",
        show_timestamp: bool = True,
        **kwargs: Any,
    ) -> None:
        self.message = message
        self.color = color
        self.show_timestamp = show_timestamp
        super().__init__(self._render_text(), **kwargs)
        self.add_class(f"message-{message.role.value}")

    @property
    def role_label(self) -> str:
        """Return a human-friendly role label."""
        if self.message.role is Role.USER:
            return "You"
        if self.message.role is Role.ASSISTANT:
            return "AI"
        return "System"

    def _render_text(self) -> Text:
        header = Text(f"{self.role_label}:", style=f"bold {self.color}".strip())
        if self.show_timestamp:
            stamp = datetime.fromtimestamp(self.message.timestamp).strftime("%H:%M:%S")
            header.append(f"  {stamp}", style="dim")
        return Text("\n").join([header, Text(self.message.content)])
