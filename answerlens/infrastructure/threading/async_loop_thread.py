# answerlens/infrastructure/threading/async_loop_thread.py
"""
Runs an asyncio event loop on a dedicated background thread.

The Qt GUI thread owns its own event loop, so the capture pipeline lives
on this one instead and the two talk through thread-safe hand-offs.
"""
import asyncio
import threading
import traceback
from concurrent.futures import Future
from typing import Any, Coroutine, Optional

from answerlens.domain.services.i_logger_service import ILoggerService


class AsyncLoopThread:
    """Owns a background thread running ``loop.run_forever``."""

    def __init__(self, logger: ILoggerService, name: str = "AnswerLensLoop"):
        self.logger = logger
        self.name = name
        self.loop = asyncio.new_event_loop()
        self._thread: Optional[threading.Thread] = None
        self._started = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        self._started.wait()
        self.logger.debug("Event loop thread started", thread=self.name)

    def _run(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.call_soon(self._started.set)
        try:
            self.loop.run_forever()
        finally:
            self.loop.close()

    def submit(self, coro: Coroutine[Any, Any, Any]) -> Future:
        """
        Schedule a coroutine on the loop from any thread.

        Exceptions escaping the coroutine are logged when it finishes.
        """
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        future.add_done_callback(self._log_failure)
        return future

    def call_soon(self, callback, *args) -> None:
        self.loop.call_soon_threadsafe(callback, *args)

    def _log_failure(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self.logger.error(f"Background task failed: {error}")
            self.logger.debug("".join(traceback.format_exception(type(error), error, error.__traceback__)))

    def stop(self, timeout: float = 2.0) -> None:
        if not self.is_running:
            return
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout)
        self.logger.debug("Event loop thread stopped", thread=self.name)
