"""
In-process Side-Effect Queue (outbox)

Commands commit first, then enqueue their side effects here:
- Use case → enqueue() → memory stream → worker (lifespan task group) → job()

Failure policy:
- A failing job is logged and counted, the worker keeps consuming
- A full buffer drops the job with a warning (the change is already committed,
  clients can always re-fetch)
"""

import anyio
from anyio import WouldBlock, create_memory_object_stream
from anyio.abc import TaskStatus

from src.platform.event.i_side_effect_queue import ISideEffectQueue, SideEffectJob
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics


class SideEffectQueue(ISideEffectQueue):
    def __init__(self, *, max_buffer_size: int = 1000) -> None:
        self._send_stream, self._receive_stream = create_memory_object_stream[
            tuple[str, SideEffectJob]
        ](max_buffer_size=max_buffer_size)

    def enqueue(self, *, name: str, job: SideEffectJob) -> None:
        try:
            self._send_stream.send_nowait((name, job))
        except WouldBlock:
            metrics.record_side_effect(job=name, result='dropped')
            Logger.base.warning(f'⚠️ [SIDE_EFFECT] Queue full, dropping job={name}')

    async def run(self, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED) -> None:
        """Worker loop, started with `await task_group.start(queue.run)`"""
        task_status.started()
        Logger.base.info('📬 [SIDE_EFFECT] Worker started')
        async for name, job in self._receive_stream:
            await self._execute(name=name, job=job)

    async def drain(self) -> int:
        executed = 0
        while True:
            try:
                name, job = self._receive_stream.receive_nowait()
            except WouldBlock:
                return executed
            await self._execute(name=name, job=job)
            executed += 1

    @property
    def pending(self) -> int:
        return self._receive_stream.statistics().current_buffer_used

    async def _execute(self, *, name: str, job: SideEffectJob) -> None:
        try:
            await job()
        except Exception as e:
            metrics.record_side_effect(job=name, result='failed')
            Logger.base.warning(f'⚠️ [SIDE_EFFECT] job={name} failed: {type(e).__name__}: {e}')
        else:
            metrics.record_side_effect(job=name, result='success')
