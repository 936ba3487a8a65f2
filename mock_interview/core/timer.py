"""Recurring countdown timer driven by an asyncio task."""

import asyncio
from typing import Awaitable, Callable, Optional

from ..utils.logging import get_logger

TickCallback = Callable[[], Awaitable[None]]


class CountdownTimer:
    """Calls ``on_tick`` every ``interval`` seconds until stopped.

    The callback may stop or restart the timer from inside the tick, so
    each run of the loop carries a generation number and exits as soon as
    it no longer matches the current one.
    """

    def __init__(self, on_tick: TickCallback, interval: float = 1.0):
        self.on_tick = on_tick
        self.interval = interval
        self.logger = get_logger("countdown_timer")
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking, replacing any previous run."""
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._run(self._generation))

    def stop(self) -> None:
        """Stop ticking.

        A tick already in progress is left to finish when ``stop`` is called
        from inside it.
        """
        self._generation += 1
        if self._task is None:
            return
        if self._task is not asyncio.current_task() and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, generation: int) -> None:
        while generation == self._generation:
            await asyncio.sleep(self.interval)
            if generation != self._generation:
                break
            try:
                await self.on_tick()
            except Exception as e:
                self.logger.error(f"Tick callback failed: {str(e)}")
