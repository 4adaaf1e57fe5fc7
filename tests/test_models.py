"""Tests for the chat message model."""

from __future__ import annotations

import unittest

from termchat.models import Message, Role


class MessageTests(unittest.TestCase):
    def test_create_assigns_unique_ids_and_timestamps(self) -> None:
        first = Message.create(Role.USER, "hi")
        second = Message.create("assistant", "hello")
        self.assertNotEqual(first.id, second.id)
        self.assertIs(second.role, Role.ASSISTANT)
        self.assertLessEqual(first.timestamp, second.timestamp)

    def test_to_dict_uses_plain_values(self) -> None:
        message = Message.create(Role.USER, "hi")
        self.assertEqual(
            message.to_dict(),
            {
                "id": message.id,
                "role": "user",
                "content": "hi",
                "timestamp": message.timestamp,
            },
        )

    def test_unknown_role_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Message.create("robot", "beep")


if __name__ == "__main__":
    unittest.main()
