"""Tests for the TaskManager lifecycle helper."""

from __future__ import annotations

import asyncio
import unittest

from termchat.task_manager import TaskManager


async def _sleep_forever(cancelled: list[str], label: str) -> None:
    try:
        await asyncio.sleep(9999)
    except asyncio.CancelledError:
        cancelled.append(label)
        raise


class TaskManagerTests(unittest.IsolatedAsyncioTestCase):
    """Validate named and anonymous task lifecycle management."""

    async def test_anonymous_tasks_self_clean(self) -> None:
        tm = TaskManager()
        task = tm.spawn(asyncio.sleep(0))
        self.assertEqual(tm.pending_count, 1)
        await task
        await asyncio.sleep(0)
        self.assertEqual(tm.pending_count, 0)
        self.assertEqual(await tm.cancel_anonymous(), 0)

    async def test_add_tracks_existing_task(self) -> None:
        tm = TaskManager()
        cancelled: list[str] = []
        task = asyncio.create_task(_sleep_forever(cancelled, "added"))
        tm.add(task)
        await asyncio.sleep(0)  # Let the task start.
        self.assertEqual(tm.pending_count, 1)
        self.assertEqual(await tm.cancel_anonymous(), 1)
        self.assertEqual(cancelled, ["added"])

    async def test_cancel_anonymous_leaves_named_tasks_running(self) -> None:
        tm = TaskManager()
        cancelled: list[str] = []
        named = tm.spawn(_sleep_forever(cancelled, "named"), name="loop")
        tm.spawn(_sleep_forever(cancelled, "a"))
        tm.spawn(_sleep_forever(cancelled, "b"))
        await asyncio.sleep(0)

        self.assertEqual(await tm.cancel_anonymous(), 2)
        self.assertEqual(sorted(cancelled), ["a", "b"])
        self.assertFalse(named.done())
        await tm.cancel_all()
        self.assertTrue(named.done())

    async def test_anonymous_failure_is_logged(self) -> None:
        tm = TaskManager()

        async def _fail() -> None:
            raise RuntimeError("reply lost")

        with self.assertLogs("termchat.task_manager", level="WARNING") as logs:
            task = tm.spawn(_fail())
            await asyncio.gather(task, return_exceptions=True)
            await asyncio.sleep(0)

        self.assertTrue(any("task.anonymous.exception" in line for line in logs.output))

    async def test_cancel_all_handles_mixed_tasks(self) -> None:
        tm = TaskManager()
        results: list[str] = []
        tm.spawn(_sleep_forever(results, "named"), name="n1")
        tm.spawn(_sleep_forever(results, "anon"))
        await asyncio.sleep(0)  # Let the tasks start.
        await tm.cancel_all()
        self.assertIn("named", results)
        self.assertIn("anon", results)
        self.assertEqual(tm.pending_count, 0)

    async def test_cancel_all_tolerates_finished_tasks(self) -> None:
        tm = TaskManager()
        finished = tm.spawn(asyncio.sleep(0), name="done")
        await finished
        await tm.cancel_all()
        self.assertFalse(finished.cancelled())


if __name__ == "__main__":
    unittest.main()
