from typing import Any, Awaitable, Callable, Protocol


SideEffectJob = Callable[[], Awaitable[Any]]


class ISideEffectQueue(Protocol):
    """Post-commit jobs (publish, guest notification) run outside the request transaction."""

    def enqueue(self, *, name: str, job: SideEffectJob) -> None:
        """
        Schedule a job without waiting for it

        Args:
            name: Job label used in logs and metrics
            job: Zero-argument coroutine function
        """
        ...

    async def drain(self) -> int:
        """
        Run every pending job now

        Returns:
            Number of jobs executed
        """
        ...
