"""
PicoClaw Runtime Manager - Bounded background work with graceful shutdown

This module provides:
- RuntimeManager: Spawns work that races a broadcast shutdown signal
- TaskPool: RuntimeManager with admission control on concurrency

Every spawned unit counts as active from the moment ``spawn`` returns until
its task finishes, whichever way it finishes. Shutdown is cooperative: work
still running when the signal fires is cancelled at its next suspension
point and its handle resolves to the spawn's default value.
"""

import asyncio
import logging
import threading
import time
from typing import Any, Awaitable, Optional

from ..errors import RuntimeCapacityError, ShutdownTimeoutError

logger = logging.getLogger(__name__)

SHUTDOWN_POLL_INTERVAL = 0.01


class RuntimeManager:
    """
    Tracks spawned tasks and coordinates graceful shutdown.

    Usage:
        manager = RuntimeManager()
        handle = manager.spawn(fetch_feed(), default=[])
        ...
        await manager.shutdown(timeout=5.0)
        items = await handle   # [] if shutdown won the race
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active_tasks = 0
        self._is_shutdown = False
        self._shutdown_event: Optional[asyncio.Event] = None
        self._event_loop: Optional[asyncio.AbstractEventLoop] = None

    # ------------------------------------------------------------------
    # Task lifecycle
    # ------------------------------------------------------------------

    def spawn(self, coro: Awaitable[Any], default: Any = None) -> "asyncio.Task[Any]":
        """
        Schedule ``coro`` on the running loop.

        Args:
            coro: Awaitable unit of work
            default: Value the handle resolves to if shutdown fires first

        Returns:
            asyncio.Task resolving to the work's result or ``default``
        """
        loop = asyncio.get_running_loop()
        self._increment()
        try:
            task = loop.create_task(self._race_shutdown(coro, default))
        except BaseException:
            self._decrement()
            raise
        task.add_done_callback(self._on_task_done)
        return task

    async def _race_shutdown(self, coro: Awaitable[Any], default: Any) -> Any:
        work = asyncio.ensure_future(coro)
        signal = asyncio.ensure_future(self._signal().wait())
        try:
            await asyncio.wait({work, signal}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            work.cancel()
            raise
        finally:
            signal.cancel()

        if work.done():
            return work.result()

        error = signal.exception()
        if error is not None:
            work.cancel()
            raise error

        logger.debug("Task interrupted by shutdown signal")
        work.cancel()
        try:
            await work
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.warning(f"Task failed while being cancelled for shutdown: {e}")
        return default

    def _signal(self) -> asyncio.Event:
        """Shutdown event bound to the running loop, set if shutdown already happened"""
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._shutdown_event is None or self._event_loop is not loop:
                self._shutdown_event = asyncio.Event()
                self._event_loop = loop
                if self._is_shutdown:
                    self._shutdown_event.set()
            return self._shutdown_event

    def _on_task_done(self, task: "asyncio.Task[Any]") -> None:
        self._decrement()

    def _increment(self) -> None:
        with self._lock:
            self._active_tasks += 1

    def _decrement(self) -> None:
        with self._lock:
            self._active_tasks -= 1

    def active_task_count(self) -> int:
        with self._lock:
            return self._active_tasks

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def is_shutdown(self) -> bool:
        return self._is_shutdown

    async def wait_for_shutdown(self) -> None:
        """Block until shutdown has been requested"""
        await self._signal().wait()

    async def shutdown(self, timeout: float = 30.0) -> None:
        """
        Signal shutdown and wait for active tasks to finish.

        Calling it again after the first call returns immediately.

        Args:
            timeout: Seconds to wait for the active count to reach zero

        Raises:
            ShutdownTimeoutError: Tasks still active after ``timeout``
        """
        with self._lock:
            already = self._is_shutdown
            self._is_shutdown = True
        if already:
            logger.debug("Shutdown already in progress")
            return

        logger.info("Initiating graceful shutdown")
        self._signal().set()

        start = time.monotonic()
        while True:
            active = self.active_task_count()
            if active == 0:
                logger.info("All tasks completed gracefully")
                break

            if time.monotonic() - start > timeout:
                logger.error(f"Shutdown timeout exceeded with {active} active tasks remaining")
                raise ShutdownTimeoutError(active)

            logger.debug(f"Waiting for {active} tasks to complete")
            await asyncio.sleep(SHUTDOWN_POLL_INTERVAL)

        logger.info("Graceful shutdown completed")

    def __repr__(self) -> str:
        return f"<RuntimeManager active={self.active_task_count()} shutdown={self._is_shutdown}>"


class TaskPool:
    """
    Runtime manager with a fixed concurrency ceiling.

    Spawns beyond ``max_concurrent`` are rejected, not queued.

    Usage:
        pool = TaskPool(max_concurrent=4)
        if pool.can_accept_task():
            handle = pool.spawn(job())
    """

    def __init__(self, max_concurrent: int, manager: Optional[RuntimeManager] = None):
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._max_concurrent = max_concurrent
        self.manager = manager or RuntimeManager()

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    def active_tasks(self) -> int:
        return self.manager.active_task_count()

    def can_accept_task(self) -> bool:
        return self.manager.active_task_count() < self._max_concurrent

    def spawn(self, coro: Awaitable[Any], default: Any = None) -> "asyncio.Task[Any]":
        """
        Spawn work if the pool has room.

        Raises:
            RuntimeCapacityError: Pool is at capacity (coro is closed, not run)
        """
        active = self.manager.active_task_count()
        if active >= self._max_concurrent:
            if asyncio.iscoroutine(coro):
                coro.close()
            raise RuntimeCapacityError(active, self._max_concurrent)
        return self.manager.spawn(coro, default=default)

    async def shutdown(self, timeout: float = 30.0) -> None:
        await self.manager.shutdown(timeout)

    def __repr__(self) -> str:
        return f"<TaskPool active={self.active_tasks()}/{self._max_concurrent}>"
