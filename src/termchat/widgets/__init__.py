"""Widget exports for the termchat UI."""

from .conversation import ConversationView
from .help_panel import HelpPanel
from .input_box import InputBox
from .message import MessageBubble
from .status_bar import StatusBar

__all__ = ["ConversationView", "HelpPanel", "InputBox", "MessageBubble", "StatusBar"]
