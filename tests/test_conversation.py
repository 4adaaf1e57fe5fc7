"""Tests for the conversation engine and its simulated replies."""

from __future__ import annotations

import asyncio
import random
import unittest

from termchat.channel import MessageChannel
from termchat.conversation import (
    DEFAULT_REPLIES,
    ConversationEngine,
    ReplyState,
    Submission,
)
from termchat.exceptions import ChannelClosedError, TermChatError
from termchat.models import Message, Role


class ConversationEngineTests(unittest.IsolatedAsyncioTestCase):
    """Validate submission ordering, reply selection, and cancellation."""

    def _engine(self, channel: MessageChannel, delay: float = 0.01) -> ConversationEngine:
        return ConversationEngine(channel, reply_delay=delay, rng=random.Random(7))

    async def test_user_message_is_offered_before_its_reply(self) -> None:
        channel = MessageChannel()
        engine = self._engine(channel)

        submission = engine.submit("hello")
        self.assertEqual(submission.state, ReplyState.AWAITING_REPLY)
        self.assertEqual([m.content for m in channel.history], ["hello"])
        self.assertTrue(engine.pending_count)

        reply = await submission.wait()

        self.assertIs(reply.role, Role.ASSISTANT)
        self.assertIn(reply.content, DEFAULT_REPLIES)
        self.assertEqual(submission.state, ReplyState.REPLIED)
        self.assertEqual(
            [m.role for m in channel.history], [Role.USER, Role.ASSISTANT]
        )
        self.assertEqual(engine.pending_count, 0)

    async def test_reply_is_chosen_by_injected_rng(self) -> None:
        engine = ConversationEngine(
            MessageChannel(), reply_delay=0, replies=["only one"], rng=random.Random(1)
        )
        reply = await engine.submit("anything").wait()
        self.assertEqual(reply.content, "only one")

    async def test_rapid_submissions_each_get_a_reply(self) -> None:
        channel = MessageChannel()
        engine = self._engine(channel)

        first = engine.submit("first")
        second = engine.submit("second")
        self.assertEqual(engine.pending_count, 2)
        await asyncio.gather(first.wait(), second.wait())

        history = channel.history
        self.assertEqual([m.content for m in history[:2]], ["first", "second"])
        self.assertEqual([m.role for m in history[2:]], [Role.ASSISTANT, Role.ASSISTANT])

    async def test_submit_on_closed_channel_raises(self) -> None:
        channel = MessageChannel()
        channel.shutdown()
        engine = self._engine(channel)
        with self.assertRaises(ChannelClosedError):
            engine.submit("nobody listens")
        self.assertEqual(engine.pending_count, 0)

    async def test_reply_after_shutdown_is_dropped(self) -> None:
        channel = MessageChannel()
        engine = self._engine(channel)
        submission = engine.submit("hello")
        channel.shutdown()

        with self.assertLogs("termchat.conversation", level="INFO") as logs:
            with self.assertRaises(ChannelClosedError):
                await submission.wait()

        self.assertTrue(any("conversation.reply.dropped" in line for line in logs.output))
        self.assertEqual(submission.state, ReplyState.ABANDONED)
        self.assertEqual([m.content for m in channel.history], ["hello"])

    async def test_cancel_pending_abandons_outstanding_replies(self) -> None:
        channel = MessageChannel()
        engine = self._engine(channel, delay=60)
        submissions = [engine.submit("a"), engine.submit("b")]

        cancelled = await engine.cancel_pending()

        self.assertEqual(cancelled, 2)
        self.assertEqual(engine.pending_count, 0)
        for submission in submissions:
            self.assertEqual(submission.state, ReplyState.ABANDONED)
            self.assertIsNone(submission.reply)
        self.assertEqual(len(channel), 2)

    async def test_cancel_pending_with_nothing_outstanding(self) -> None:
        engine = self._engine(MessageChannel())
        self.assertEqual(await engine.cancel_pending(), 0)

    async def test_wait_without_reply_task_raises(self) -> None:
        submission = Submission(user_message=Message.create(Role.USER, "orphan"))
        with self.assertRaises(TermChatError):
            await submission.wait()

    def test_empty_reply_list_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ConversationEngine(MessageChannel(), replies=[])


if __name__ == "__main__":
    unittest.main()
