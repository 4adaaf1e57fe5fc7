"""Keyboard shortcut overlay shown in help mode."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

SHORTCUTS: tuple[tuple[str, str], ...] = (
    ("Enter", "Send message"),
    ("Backspace", "Delete character"),
    ("Left/Right", "Move cursor"),
    ("Ctrl+U", "Clear input"),
    ("Ctrl+A", "Toggle help"),
    ("Ctrl+C", "Exit application"),
)


def help_text() -> Text:
    text = Text("HELP - Keyboard Shortcuts\n\n", style="bold yellow")
    for key, description in SHORTCUTS:
        text.append(key, style="cyan")
        text.append(f" - {description}\n")
    text.append("\nPress Ctrl+A to close this help", style="dim")
    return text


class HelpPanel(Static):
    """Static help panel; editing keys are suppressed while it is visible."""

    DEFAULT_CSS = """
    HelpPanel {
        height: auto;
        border: double $warning;
        padding: 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(help_text(), **kwargs)
