# answerlens/domain/services/i_timer_service.py
from abc import ABC, abstractmethod
from typing import Callable


class ITimerHandle(ABC):
    """A pending one-shot timer."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the timer. Cancelling a fired or cancelled timer does nothing."""
        pass

    @property
    @abstractmethod
    def active(self) -> bool:
        """True until the timer fires or is cancelled."""
        pass


class ITimerService(ABC):
    """Schedules one-shot callbacks on the thread that runs the state machine."""

    @abstractmethod
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ITimerHandle:
        """
        Run callback once after delay_ms milliseconds.

        Returns:
            A handle that cancels the callback if it has not run yet
        """
        pass
