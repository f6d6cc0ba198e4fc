# answerlens/infrastructure/threading/asyncio_timer_service.py
"""
Timer service backed by the running asyncio event loop.
"""
import asyncio
import traceback
from typing import Callable, Optional

from answerlens.domain.services.i_logger_service import ILoggerService
from answerlens.domain.services.i_timer_service import ITimerHandle, ITimerService


class AsyncioTimerHandle(ITimerHandle):
    """Wraps an asyncio.TimerHandle and tracks whether it has fired."""

    def __init__(self):
        self._handle: Optional[asyncio.TimerHandle] = None
        self._active = True

    def attach(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def mark_fired(self) -> None:
        self._active = False

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._active = False

    @property
    def active(self) -> bool:
        return self._active


class AsyncioTimerService(ITimerService):
    """
    Schedules callbacks with loop.call_later.

    Must be used from the loop's own thread, which is where the capture
    session state machine runs.
    """

    def __init__(self, logger: ILoggerService, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.logger = logger
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ITimerHandle:
        handle = AsyncioTimerHandle()

        def fire():
            if not handle.active:
                return
            handle.mark_fired()
            try:
                callback()
            except Exception as e:
                self.logger.error(f"Timer callback failed: {e}")
                self.logger.debug(traceback.format_exc())

        handle.attach(self._get_loop().call_later(max(delay_ms, 0) / 1000.0, fire))
        return handle
