"""Observer plumbing between the chat session and its renderers."""

from .bus import Event, EventBus

__all__ = ["EventBus", "Event"]
