"""Keystroke model and the pure keystroke-to-action dispatcher."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Union


class Mode(str, Enum):
    """Input mode gating whether keys reach the editor."""

    NORMAL = "normal"
    HELP = "help"

    def toggled(self) -> Mode:
        return Mode.NORMAL if self is Mode.HELP else Mode.HELP


@dataclass(frozen=True)
class KeyEvent:
    """A normalized keystroke."""

    name: str = ""
    sequence: str = ""
    ctrl: bool = False
    meta: bool = False
    shift: bool = False


@dataclass(frozen=True)
class Exit:
    pass


@dataclass(frozen=True)
class ToggleMode:
    pass


@dataclass(frozen=True)
class Noop:
    pass


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class DeleteBackward:
    pass


@dataclass(frozen=True)
class ClearBuffer:
    pass


@dataclass(frozen=True)
class MoveCursor:
    direction: str


@dataclass(frozen=True)
class InsertChar:
    char: str


Action = Union[
    Exit, ToggleMode, Noop, Submit, DeleteBackward, ClearBuffer, MoveCursor, InsertChar
]


@dataclass(frozen=True)
class DispatchContext:
    """Everything a dispatch rule may look at."""

    key: KeyEvent
    mode: Mode
    buffer_is_empty: bool


@dataclass(frozen=True)
class Rule:
    """One ``(predicate, action)`` pair of the dispatch table."""

    name: str
    matches: Callable[[DispatchContext], bool]
    build: Callable[[DispatchContext], Action]


# Order is the keyboard contract: first match wins.
DEFAULT_RULES: tuple[Rule, ...] = (
    Rule("exit", lambda c: c.key.ctrl and c.key.name == "c", lambda c: Exit()),
    Rule(
        "toggle_mode",
        lambda c: c.key.ctrl and c.key.name == "a",
        lambda c: ToggleMode(),
    ),
    Rule("help_suppress", lambda c: c.mode is Mode.HELP, lambda c: Noop()),
    Rule("submit", lambda c: c.key.name == "return", lambda c: Submit()),
    Rule(
        "delete_backward",
        lambda c: c.key.name == "backspace",
        lambda c: DeleteBackward(),
    ),
    Rule(
        "clear_buffer",
        lambda c: c.key.ctrl and c.key.name == "u",
        lambda c: ClearBuffer(),
    ),
    Rule(
        "move_cursor",
        lambda c: c.key.name in ("left", "right"),
        lambda c: MoveCursor(c.key.name),
    ),
    Rule(
        "insert_char",
        lambda c: len(c.key.sequence) == 1 and not c.key.ctrl and not c.key.meta,
        lambda c: InsertChar(c.key.sequence),
    ),
)


class KeyDispatcher:
    """Evaluate an ordered rule table top-down and return the first action."""

    def __init__(self, rules: tuple[Rule, ...] = DEFAULT_RULES) -> None:
        self.rules = rules

    def dispatch(self, key: KeyEvent, mode: Mode, buffer_is_empty: bool) -> Action:
        context = DispatchContext(key=key, mode=mode, buffer_is_empty=buffer_is_empty)
        for rule in self.rules:
            if rule.matches(context):
                return rule.build(context)
        return Noop()


_DEFAULT_DISPATCHER = KeyDispatcher()


def dispatch(key: KeyEvent, mode: Mode, buffer_is_empty: bool) -> Action:
    """Map a keystroke to an action using the default rule table."""
    return _DEFAULT_DISPATCHER.dispatch(key, mode, buffer_is_empty)


_MODIFIERS = {"ctrl", "meta", "alt", "shift", "super"}
_KEY_ALIASES = {"enter": "return", "ctrl+h": "backspace"}


def key_event_from_textual(
    key: str, character: str | None, is_printable: bool
) -> KeyEvent:
    """Normalize a Textual key description such as ``"ctrl+c"`` into a KeyEvent.

    Printable keys keep their character as the sequence; everything else is
    matched by name only and carries an empty sequence.
    """
    key = _KEY_ALIASES.get(key, key)
    parts = key.split("+")
    modifiers = {part for part in parts[:-1] if part in _MODIFIERS}
    base = parts[-1]
    if is_printable and character:
        name = base.lower() if len(base) == 1 and base.isalpha() else ""
        if base == "space":
            name = "space"
        sequence = character
    else:
        name = _KEY_ALIASES.get(base, base)
        sequence = ""
    return KeyEvent(
        name=name,
        sequence=sequence,
        ctrl="ctrl" in modifiers,
        meta=bool(modifiers & {"meta", "alt", "super"}),
        shift="shift" in modifiers or (len(base) == 1 and base.isupper()),
    )
