"""Per-field background resolution tasks on the running asyncio loop."""

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class SelectionTaskManager:
    """
    Manages the background resolution task of every field of one builder.

    Compilation is synchronous, selection lookups are not. The builder hands
    each field's resolution coroutine to this manager, which:
    - Starts it right away when an event loop is running
    - Otherwise keeps it pending until someone awaits ``ready()``
    - Logs failures and re-raises them to whoever awaits the field

    Previous tasks for the same key are not cancelled: a stale lookup that
    finishes late may still merge its records.

    Usage:
        tasks = SelectionTaskManager()
        tasks.run("country", lambda: resolve("country"))

        await tasks.ready("country")  # deterministic wait for one field
        await tasks.settle()          # wait for every field
    """

    def __init__(self):
        self._tasks: Dict[str, asyncio.Task] = {}
        self._pending: Dict[str, Callable[[], Awaitable[Any]]] = {}

    @staticmethod
    def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def ensure_future(self, awaitable: Awaitable[Any]) -> Awaitable[Any]:
        """Schedule an awaitable now if a loop runs, else return it untouched."""
        if self._running_loop() is None:
            return awaitable
        return asyncio.ensure_future(awaitable)

    def run(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Optional[asyncio.Task]:
        """
        Start (or defer) the background resolution for ``key``.

        Args:
            key: Field name
            factory: Zero-argument callable returning the coroutine to run

        Returns:
            The started task, or None when deferred until ``ready()``
        """
        loop = self._running_loop()
        if loop is None:
            logger.debug(f"No running loop, deferring resolution of '{key}'")
            self._tasks.pop(key, None)
            self._pending[key] = factory
            return None

        self._pending.pop(key, None)
        task = loop.create_task(factory())
        task.add_done_callback(partial(self._on_done, key))
        self._tasks[key] = task
        return task

    def _on_done(self, key: str, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Background resolution of '{key}' failed: {error!r}")

    def is_pending(self, key: str) -> bool:
        """True while the resolution of ``key`` has not completed."""
        if key in self._pending:
            return True
        task = self._tasks.get(key)
        return task is not None and not task.done()

    async def ready(self, key: str) -> None:
        """Wait for the latest resolution of ``key``; re-raises its failure."""
        factory = self._pending.pop(key, None)
        if factory is not None:
            self.run(key, factory)
        task = self._tasks.get(key)
        if task is not None:
            await task

    async def settle(self) -> None:
        """Wait for every known resolution, deferred ones included."""
        for key in list(self._pending) + list(self._tasks):
            await self.ready(key)
