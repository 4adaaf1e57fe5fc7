"""Composer widget that renders the text buffer and receives keystrokes."""

from __future__ import annotations

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widgets import Static

from ..keys import KeyEvent, key_event_from_textual
from ..text_buffer import Cursor

PLACEHOLDER_TEXT = "Type your message here..."
HINT_TEXT = "Ctrl+A for help | Ctrl+C to exit"


class InputBox(Static, can_focus=True):
    """Show buffer contents with a cursor, and forward every key to the app.

    Editing happens in the session's text buffer; this widget only renders
    it and normalizes raw keys.
    """

    DEFAULT_CSS = """
    InputBox {
        height: auto;
        min-height: 4;
        border: round $success;
        padding: 0 1;
    }
    """

    class KeyPressed(Message):
        """Posted for each keystroke received while the composer has focus."""

        def __init__(self, key: KeyEvent) -> None:
            super().__init__()
            self.key = key

    class TextPasted(Message):
        """Posted when text is pasted into the composer."""

        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    def on_mount(self) -> None:
        self.show_buffer("", Cursor())

    def show_buffer(self, text: str, cursor: Cursor) -> None:
        """Render buffer text with the cursor cell highlighted."""
        if not text:
            body = Text(PLACEHOLDER_TEXT, style="dim")
        else:
            body = Text()
            for row, line in enumerate(text.split("\n")):
                if row:
                    body.append("\n")
                if row != cursor.row:
                    body.append(line)
                    continue
                body.append(line[: cursor.column])
                body.append(line[cursor.column : cursor.column + 1] or " ", style="reverse")
                body.append(line[cursor.column + 1 :])
        footer = Text(
            f"\nCursor: ({cursor.row}, {cursor.column}) | {HINT_TEXT}", style="dim"
        )
        self.update(body + footer)

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.post_message(
            self.KeyPressed(
                key_event_from_textual(event.key, event.character, event.is_printable)
            )
        )

    def on_paste(self, event: events.Paste) -> None:
        event.stop()
        self.post_message(self.TextPasted(event.text))
