"""Unit tests for individual widget classes."""

from __future__ import annotations

import unittest

from termchat.models import Message, Role

try:
    from termchat.widgets.help_panel import SHORTCUTS, help_text
    from termchat.widgets.message import MessageBubble
except ModuleNotFoundError:
    SHORTCUTS = ()  # type: ignore[assignment]
    help_text = None  # type: ignore[assignment]
    MessageBubble = None  # type: ignore[assignment,misc]


@unittest.skipIf(MessageBubble is None, "textual is not installed")
class MessageBubbleTests(unittest.TestCase):
    """Validate MessageBubble labels and rendering."""

    def test_role_labels(self) -> None:
        assert MessageBubble is not None
        expected = {Role.USER: "You", Role.ASSISTANT: "AI", Role.SYSTEM: "System"}
        for role, label in expected.items():
            with self.subTest(role=role):
                bubble = MessageBubble(Message.create(role, "text"))
                self.assertEqual(bubble.role_label, label)
                self.assertTrue(bubble.has_class(f"message-{role.value}"))

    def test_rendered_text_contains_label_and_content(self) -> None:
        assert MessageBubble is not None
        bubble = MessageBubble(
            Message.create(Role.USER, "hello there"), show_timestamp=False
        )
        rendered = bubble._render_text().plain
        self.assertEqual(rendered, "You:\nhello there")


@unittest.skipIf(help_text is None, "textual is not installed")
class HelpPanelTests(unittest.TestCase):
    def test_help_text_lists_every_shortcut(self) -> None:
        assert help_text is not None
        plain = help_text().plain
        for key, description in SHORTCUTS:
            self.assertIn(f"{key} - {description}", plain)
        self.assertIn("Ctrl+A", plain)


if __name__ == "__main__":
    unittest.main()
