import asyncio
from typing import Coroutine, Set


class RefreshScheduler:
    """
    Runs re-fetches as fire-and-forget tasks.

    Nothing is cancelled when a newer fetch is scheduled, so overlapping
    fetches finish in whatever order their responses arrive. Callers that need
    a settled view await drain().
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    def schedule(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.create_task(coro)
        # the loop only keeps weak references to tasks
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every scheduled task, including ones scheduled while waiting"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
