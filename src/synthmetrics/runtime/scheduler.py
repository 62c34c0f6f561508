"""Process-wide scheduler for periodic and deferred background tasks.

Every recurring job in the service (system sampler, business sampler,
traffic bursts and the traffic deadline) is an asyncio task owned by one
``Scheduler``. Tasks are addressed by name; scheduling a name that is
already in use replaces the previous task.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
Job = Callable[[], object]


class Scheduler:
    """Owns named asyncio tasks with a start/stop lifecycle.

    Args:
        sleep: Awaitable sleep function. Tests inject a fake to control time.
    """

    def __init__(self, sleep: Sleep = asyncio.sleep) -> None:
        self._sleep = sleep
        self._tasks: dict[str, asyncio.Task[None]] = {}

    def every(
        self, name: str, interval: float, func: Job, *, immediate: bool = False
    ) -> asyncio.Task[None]:
        """Run ``func`` every ``interval`` seconds until cancelled.

        Exceptions raised by ``func`` are logged and the schedule carries on.

        Args:
            name: Task name; replaces any task already scheduled under it.
            interval: Seconds between runs.
            func: Synchronous callable to run.
            immediate: Also run once right away, before the first sleep.

        Raises:
            ValueError: If ``interval`` is not positive.
            RuntimeError: If called without a running event loop.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        loop = asyncio.get_running_loop()
        return self._spawn(loop, name, self._repeat(name, interval, func, immediate))

    def after(self, name: str, delay: float, func: Job) -> asyncio.Task[None]:
        """Run ``func`` once after ``delay`` seconds unless cancelled first.

        Raises:
            ValueError: If ``delay`` is negative.
            RuntimeError: If called without a running event loop.
        """
        if delay < 0:
            raise ValueError("delay must not be negative")
        loop = asyncio.get_running_loop()
        return self._spawn(loop, name, self._defer(name, delay, func))

    def cancel(self, name: str) -> bool:
        """Cancel a scheduled task.

        Returns:
            True if a task was scheduled under ``name``.
        """
        task = self._tasks.pop(name, None)
        if task is None:
            return False
        task.cancel()
        return True

    def is_scheduled(self, name: str) -> bool:
        task = self._tasks.get(name)
        return task is not None and not task.done()

    def names(self) -> list[str]:
        return [name for name, task in self._tasks.items() if not task.done()]

    async def stop(self) -> None:
        """Cancel every task and wait for them to finish."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _spawn(
        self, loop: asyncio.AbstractEventLoop, name: str, coro: Coroutine[None, None, None]
    ) -> asyncio.Task[None]:
        self.cancel(name)
        task = loop.create_task(coro, name=f"synthmetrics:{name}")
        self._tasks[name] = task
        return task

    async def _repeat(self, name: str, interval: float, func: Job, immediate: bool) -> None:
        if immediate:
            self._run(name, func)
        while True:
            await self._sleep(interval)
            self._run(name, func)

    async def _defer(self, name: str, delay: float, func: Job) -> None:
        await self._sleep(delay)
        # Unregister first so func may reschedule or cancel under the same name
        if self._tasks.get(name) is asyncio.current_task():
            del self._tasks[name]
        self._run(name, func)

    @staticmethod
    def _run(name: str, func: Job) -> None:
        try:
            func()
        except Exception:
            logger.exception("Scheduled task %s failed", name)
