"""Main Textual application for the terminal chat client."""

from __future__ import annotations

import logging
import sys
from typing import Any

from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import Header

from .config import load_config
from .events.bus import (
    BUFFER_CHANGED,
    EXIT_REQUESTED,
    MODE_CHANGED,
    TRANSCRIPT_APPENDED,
    Event,
)
from .keys import Mode
from .logging_utils import configure_logging
from .session import ChatSession
from .telemetry import Telemetry
from .widgets.conversation import ConversationView
from .widgets.help_panel import HelpPanel
from .widgets.input_box import InputBox
from .widgets.status_bar import StatusBar

LOGGER = logging.getLogger(__name__)


def build_session(config: dict[str, dict[str, Any]]) -> ChatSession:
    """Create a chat session from validated configuration."""
    chat_cfg = config["chat"]
    return ChatSession(
        username=str(config["app"]["username"]),
        reply_delay=int(chat_cfg["reply_delay_ms"]) / 1000,
        replies=list(chat_cfg["replies"]),
        telemetry=Telemetry(verbose=bool(config["telemetry"]["verbose"])),
    )


class TermChatApp(App[None]):
    """Chat TUI: transcript on top, composer at the bottom, help overlay."""

    CSS = """
    Screen {
        layout: vertical;
        background: $background;
    }

    #app-root {
        layout: vertical;
        width: 100%;
        height: 1fr;
    }

    #status_bar {
        height: auto;
        padding: 0 1;
        border: solid $accent;
    }

    #conversation {
        height: 1fr;
        padding: 0 1;
    }

    #help_panel {
        height: 1fr;
    }

    .hidden {
        display: none;
    }
    """

    def __init__(
        self,
        config: dict[str, dict[str, Any]] | None = None,
        session: ChatSession | None = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        configure_logging(self.config["logging"])
        self.window_title = str(self.config["app"]["title"])
        self.session = session or build_session(self.config)
        LOGGER.info(
            "app.python",
            extra={
                "event": "app.python",
                "executable": sys.executable,
                "version": sys.version.split()[0],
            },
        )

        # Cached widget references, populated in on_mount().
        self._w_status: StatusBar | None = None
        self._w_conversation: ConversationView | None = None
        self._w_help: HelpPanel | None = None
        self._w_input: InputBox | None = None
        super().__init__()

    def compose(self) -> ComposeResult:
        """Compose app widgets."""
        ui_cfg = self.config["ui"]
        yield Header()
        with Container(id="app-root"):
            yield StatusBar(id="status_bar")
            yield ConversationView(
                id="conversation",
                colors={
                    "user": str(ui_cfg["user_message_color"]),
                    "assistant": str(ui_cfg["assistant_message_color"]),
                },
                show_timestamps=bool(ui_cfg["show_timestamps"]),
            )
            yield HelpPanel(id="help_panel", classes="hidden")
            yield InputBox(id="input_box")

    async def on_mount(self) -> None:
        """Wire session events to widgets and start the transcript loop."""
        self.title = self.window_title
        self.sub_title = self.session.username

        self._w_status = self.query_one("#status_bar", StatusBar)
        self._w_conversation = self.query_one("#conversation", ConversationView)
        self._w_help = self.query_one("#help_panel", HelpPanel)
        self._w_input = self.query_one("#input_box", InputBox)

        events = self.session.events
        events.subscribe(BUFFER_CHANGED, self._on_buffer_changed)
        events.subscribe(MODE_CHANGED, self._on_mode_changed)
        events.subscribe(TRANSCRIPT_APPENDED, self._on_transcript_appended)
        events.subscribe(EXIT_REQUESTED, self._on_exit_requested)

        await self.session.start()
        self._w_input.focus()
        self._update_status_bar()

    async def on_input_box_key_pressed(self, message: InputBox.KeyPressed) -> None:
        await self.session.handle_key(message.key)
        self._update_status_bar()

    async def on_input_box_text_pasted(self, message: InputBox.TextPasted) -> None:
        await self.session.insert_text(message.text)

    def _on_buffer_changed(self, event: Event) -> None:
        if self._w_input is not None:
            self._w_input.show_buffer(event.data["text"], event.data["cursor"])

    def _on_mode_changed(self, event: Event) -> None:
        help_visible = event.data["mode"] is Mode.HELP
        if self._w_help is not None and self._w_conversation is not None:
            self._w_help.set_class(not help_visible, "hidden")
            self._w_conversation.set_class(help_visible, "hidden")
        LOGGER.info(
            "app.mode.transition",
            extra={"event": "app.mode.transition", "to_mode": event.data["mode"].value},
        )
        self._update_status_bar()

    async def _on_transcript_appended(self, event: Event) -> None:
        if self._w_conversation is not None:
            await self._w_conversation.add_message(event.data["message"])
        self._update_status_bar()

    def _on_exit_requested(self, _event: Event) -> None:
        LOGGER.info("app.exit.requested", extra={"event": "app.exit.requested"})
        self.exit()

    def _update_status_bar(self) -> None:
        if self._w_status is None:
            return
        self._w_status.set_status(
            username=self.session.username,
            message_count=len(self.session.transcript),
            mode=self.session.mode.value,
            streaming=self.session.is_awaiting_reply,
        )

    async def on_unmount(self) -> None:
        """Abandon pending replies and drain the transcript during shutdown."""
        # Widgets are going away; stop rendering before the final drain.
        self.session.events.clear()
        await self.session.shutdown()
