"""Tests for tokenfield.scheduling -- deferred callbacks."""

from __future__ import annotations

import asyncio

import pytest

from tokenfield.scheduling import DeferredQueue, call_soon


class TestCallSoon:
    def test_runs_immediately_without_loop(self) -> None:
        calls: list[str] = []
        call_soon(lambda: calls.append("ran"))
        assert calls == ["ran"]

    @pytest.mark.asyncio
    async def test_defers_to_next_loop_turn(self) -> None:
        calls: list[str] = []
        call_soon(lambda: calls.append("ran"))
        assert calls == []
        await asyncio.sleep(0)
        assert calls == ["ran"]


class TestDeferredQueue:
    """Callbacks wait until run_pending is called."""

    def test_schedule_does_not_run(self) -> None:
        queue = DeferredQueue()
        calls: list[int] = []
        queue(lambda: calls.append(1))
        assert calls == []
        assert queue.pending == 1

    def test_run_pending_in_order(self) -> None:
        queue = DeferredQueue()
        calls: list[int] = []
        queue.schedule(lambda: calls.append(1))
        queue.schedule(lambda: calls.append(2))
        assert queue.run_pending() == 2
        assert calls == [1, 2]
        assert queue.pending == 0

    def test_callbacks_scheduled_while_draining_also_run(self) -> None:
        queue = DeferredQueue()
        calls: list[str] = []

        def first() -> None:
            calls.append("first")
            queue.schedule(lambda: calls.append("second"))

        queue.schedule(first)
        assert queue.run_pending() == 2
        assert calls == ["first", "second"]

    def test_empty_queue(self) -> None:
        assert DeferredQueue().run_pending() == 0
