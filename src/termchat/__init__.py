"""Top-level package for termchat."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import TermChatApp
    from .channel import MessageChannel
    from .config import ensure_config_dir, load_config
    from .conversation import ConversationEngine
    from .exceptions import (
        ChannelClosedError,
        ConfigValidationError,
        CursorOutOfBoundsError,
        EmptyInputError,
        TermChatError,
    )
    from .keys import KeyEvent, Mode, dispatch
    from .models import Message, Role
    from .session import ChatSession
    from .telemetry import Telemetry
    from .text_buffer import TextBuffer
    from .transcript import Transcript, TranscriptProjector

__all__ = [
    "ChannelClosedError",
    "ChatSession",
    "ConfigValidationError",
    "ConversationEngine",
    "CursorOutOfBoundsError",
    "EmptyInputError",
    "KeyEvent",
    "Message",
    "MessageChannel",
    "Mode",
    "Role",
    "Telemetry",
    "TermChatApp",
    "TermChatError",
    "TextBuffer",
    "Transcript",
    "TranscriptProjector",
    "dispatch",
    "ensure_config_dir",
    "load_config",
]

_LAZY_EXPORTS: dict[str, str] = {
    "TermChatApp": ".app",
    "MessageChannel": ".channel",
    "ensure_config_dir": ".config",
    "load_config": ".config",
    "ConversationEngine": ".conversation",
    "ChannelClosedError": ".exceptions",
    "ConfigValidationError": ".exceptions",
    "CursorOutOfBoundsError": ".exceptions",
    "EmptyInputError": ".exceptions",
    "TermChatError": ".exceptions",
    "KeyEvent": ".keys",
    "Mode": ".keys",
    "dispatch": ".keys",
    "Message": ".models",
    "Role": ".models",
    "ChatSession": ".session",
    "Telemetry": ".telemetry",
    "TextBuffer": ".text_buffer",
    "Transcript": ".transcript",
    "TranscriptProjector": ".transcript",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep the Textual UI optional at import time."""
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)
