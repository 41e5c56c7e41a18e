"""Registry for fire-and-forget coroutines."""

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class DetachedTasks:
    """Keeps strong references to detached tasks and logs their failures."""

    _tasks: set[asyncio.Task[object]] = field(default_factory=set)

    def spawn(
        self, coro: Coroutine[object, object, object], name: str
    ) -> asyncio.Task | None:
        """Schedule a coroutine on the running loop without awaiting it.

        Outside a running loop the coroutine is closed and dropped.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.warning(
                "No running event loop, dropping detached task",
                extra={"task_name": name},
            )
            return None
        return self.adopt(loop.create_task(coro, name=name))

    def adopt(self, task: asyncio.Task) -> asyncio.Task:
        """Track an already running task whose result nobody will await."""
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(
                "Detached task failed",
                exc_info=exc,
                extra={"task_name": task.get_name()},
            )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every tracked task, including ones spawned while waiting."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
