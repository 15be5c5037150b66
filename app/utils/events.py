from typing import Dict, List, Callable, Any
import asyncio
from concurrent.futures import Future, ThreadPoolExecutor
import logging

logger = logging.getLogger(__name__)

class EventBus:
    """In-process fan-out to audit and notification sinks.

    `emit` is fire-and-forget: the caller never waits on, or sees the result
    of, a handler. `wait_idle` drains handlers still running on worker
    threads, for shutdown.
    """

    def __init__(self, max_workers: int = 4):
        self._handlers: Dict[str, List[Callable]] = {}
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._pending: set = set()

    def subscribe(self, event_type: str, handler: Callable):
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: Callable):
        if event_type in self._handlers and handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)

    def clear(self):
        self._handlers.clear()

    def emit(self, event_type: str, data: Dict[str, Any]):
        for handler in list(self._handlers.get(event_type, [])):
            if asyncio.iscoroutinefunction(handler):
                self._schedule_coroutine(event_type, handler, data)
            else:
                future = self._executor.submit(self._run_sync_handler, handler, data)
                self._track(future)

    def _schedule_coroutine(self, event_type: str, handler: Callable, data: Dict[str, Any]):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop in this thread; hand the coroutine to a worker thread
            future = self._executor.submit(asyncio.run, self._run_async_handler(handler, data))
            self._track(future)
            return
        task = loop.create_task(self._run_async_handler(handler, data))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _track(self, future: Future):
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)

    async def _run_async_handler(self, handler: Callable, data: Dict[str, Any]):
        try:
            await handler(data)
        except Exception as e:
            logger.error(f"Error in async event handler {handler.__name__}: {e}")

    def _run_sync_handler(self, handler: Callable, data: Dict[str, Any]):
        try:
            handler(data)
        except Exception as e:
            logger.error(f"Error in sync event handler {handler.__name__}: {e}")

    def wait_idle(self, timeout: float = 5.0):
        """Block until handlers dispatched to worker threads have finished."""
        for pending in list(self._pending):
            if isinstance(pending, Future):
                pending.result(timeout=timeout)

event_bus = EventBus()
