# answerlens/infrastructure/input/hotkey_manager.py
"""
Global hotkeys through pynput.

pynput runs its listener on its own daemon thread, so callbacks must hand
their work off to the GUI or event-loop thread rather than touch widgets.
"""
import traceback
from typing import Callable, Dict, Optional

from pynput import keyboard

from answerlens.domain.common.errors import ValidationError
from answerlens.domain.common.result import Result
from answerlens.domain.services.i_logger_service import ILoggerService


class HotkeyManager:
    """Maps hotkey strings such as ``<ctrl>+<shift>+s`` to callbacks."""

    def __init__(self, logger: ILoggerService):
        self.logger = logger
        self.bindings: Dict[str, Callable[[], None]] = {}
        self.listener: Optional[keyboard.GlobalHotKeys] = None

    def bind(self, hotkey: str, callback: Callable[[], None]) -> Result[str]:
        """
        Register a callback for a hotkey. Takes effect on the next start().

        Args:
            hotkey: pynput hotkey string
            callback: Called on the listener thread when the keys are pressed
        """
        try:
            keyboard.HotKey.parse(hotkey)
        except ValueError as e:
            error = ValidationError(
                message=f"Invalid hotkey '{hotkey}': {e}",
                details={"hotkey": hotkey},
                inner_error=e
            )
            self.logger.warning(str(error))
            return Result.fail(error)

        self.bindings[hotkey] = self._wrap(hotkey, callback)
        return Result.ok(hotkey)

    def _wrap(self, hotkey: str, callback: Callable[[], None]) -> Callable[[], None]:
        def on_activate():
            self.logger.debug(f"Hotkey '{hotkey}' activated")
            try:
                callback()
            except Exception as e:
                self.logger.error(f"Error executing hotkey callback: {e}", hotkey=hotkey)
                self.logger.debug(traceback.format_exc())
        return on_activate

    def start(self) -> Result[bool]:
        if self.listener and self.listener.is_alive():
            self.stop()

        if not self.bindings:
            return Result.ok(False)

        try:
            self.listener = keyboard.GlobalHotKeys(dict(self.bindings))
            self.listener.start()
        except Exception as e:
            # Backends raise platform-specific errors, e.g. no X display
            self.logger.error(f"Failed to start hotkey listener: {e}")
            self.listener = None
            return Result.fail(f"Failed to start hotkey listener: {e}")

        self.logger.info("Global hotkey listener started", hotkeys=",".join(self.bindings))
        return Result.ok(True)

    def stop(self) -> None:
        if self.listener and self.listener.is_alive():
            self.listener.stop()
            self.logger.info("Global hotkey listener stopped")
        self.listener = None
