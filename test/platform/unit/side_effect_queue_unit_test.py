"""
Unit tests for SideEffectQueue

Test Focus:
1. Worker started in a task group runs queued jobs in order
2. A failing job does not stop the worker
3. A full buffer drops the job instead of blocking the request
4. drain() runs whatever is pending (shutdown path)
"""

from unittest.mock import AsyncMock

import anyio
import pytest

from src.platform.event.side_effect_queue import SideEffectQueue


pytestmark = pytest.mark.unit


class TestSideEffectQueue:
    @pytest.mark.asyncio
    async def test_worker_runs_jobs_in_order(self):
        queue = SideEffectQueue(max_buffer_size=10)
        done = anyio.Event()
        seen: list[str] = []

        async def job(name: str) -> None:
            seen.append(name)
            if name == 'third':
                done.set()

        async with anyio.create_task_group() as tg:
            await tg.start(queue.run)
            for name in ('first', 'second', 'third'):
                queue.enqueue(name=name, job=lambda name=name: job(name))
            with anyio.fail_after(2):
                await done.wait()
            tg.cancel_scope.cancel()

        assert seen == ['first', 'second', 'third']

    @pytest.mark.asyncio
    async def test_failing_job_does_not_stop_the_queue(self):
        queue = SideEffectQueue(max_buffer_size=10)
        failing = AsyncMock(side_effect=RuntimeError('gateway down'))
        healthy = AsyncMock()

        queue.enqueue(name='guest_notification', job=failing)
        queue.enqueue(name='publish_change', job=healthy)

        assert await queue.drain() == 2
        failing.assert_awaited_once()
        healthy.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_full_buffer_drops_job(self):
        queue = SideEffectQueue(max_buffer_size=1)
        kept = AsyncMock()
        dropped = AsyncMock()

        queue.enqueue(name='publish_change', job=kept)
        queue.enqueue(name='publish_change', job=dropped)

        assert queue.pending == 1
        await queue.drain()
        kept.assert_awaited_once()
        dropped.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_drain_on_empty_queue(self):
        assert await SideEffectQueue().drain() == 0
