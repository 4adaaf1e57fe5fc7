"""Status bar widget for user, message count, and mode."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.widgets import Label, Static


class StatusBar(Static):
    """Render compact session status.

    Segments (left to right):
        User: alice  |  Messages: 4  |  Mode: normal            ● Streaming
    """

    DEFAULT_CSS = """
    StatusBar {
        layout: horizontal;
        height: auto;
    }
    StatusBar Label {
        margin-right: 1;
    }
    StatusBar #status_spacer {
        width: 1fr;
    }
    StatusBar #status_streaming {
        color: $success;
    }
    """

    def compose(self) -> ComposeResult:
        yield Label("User:", id="status_user")
        yield Label("|", id="status_sep1")
        yield Label("Messages: 0", id="status_messages")
        yield Label("|", id="status_sep2")
        yield Label("Mode: normal", id="status_mode")
        yield Label("", id="status_spacer")
        yield Label("", id="status_streaming")

    def on_mount(self) -> None:
        """Cache label references once after the DOM is ready."""
        self._lbl_user = self.query_one("#status_user", Label)
        self._lbl_messages = self.query_one("#status_messages", Label)
        self._lbl_mode = self.query_one("#status_mode", Label)
        self._lbl_streaming = self.query_one("#status_streaming", Label)

    def set_status(
        self,
        *,
        username: str,
        message_count: int,
        mode: str,
        streaming: bool,
    ) -> None:
        """Update all status segment labels."""
        self._lbl_user.update(f"User: {username}")
        self._lbl_messages.update(f"Messages: {message_count}")
        self._lbl_mode.update(f"Mode: {mode}")
        self._lbl_streaming.update("● Streaming" if streaming else "")
