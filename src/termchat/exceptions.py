"""Domain exception hierarchy for the TermChat application."""

from __future__ import annotations


class TermChatError(RuntimeError):
    """Base class for all domain-level chat errors."""


class EmptyInputError(TermChatError):
    """Raised when a blank message is submitted."""


class ChannelClosedError(TermChatError):
    """Raised when the message channel is used after shutdown."""


class CursorOutOfBoundsError(TermChatError):
    """Raised when the text buffer cursor escapes the current line."""


class ConfigValidationError(TermChatError):
    """Raised when configuration cannot be validated safely."""
