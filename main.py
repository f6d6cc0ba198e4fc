#!/usr/bin/env python3
"""
AnswerLens desktop entry point.

The GUI runs on the main thread; the capture session state machine runs
on a background asyncio loop. Commands go from the GUI and the global
hotkeys to the loop, and outcomes come back through queued Qt signals.
"""
import sys

from PySide6.QtWidgets import QApplication

from answerlens.application.app import initialize_app
from answerlens.application.capture_session import CaptureSessionStateMachine
from answerlens.domain.models.session import CancelSelection, CloseAnswer, RecognizeWithSavedRegion
from answerlens.domain.services.i_logger_service import ILoggerService
from answerlens.domain.services.i_selection_surface import ISelectionSurface
from answerlens.domain.services.i_settings_repository import ISettingsRepository
from answerlens.infrastructure.input.hotkey_manager import HotkeyManager
from answerlens.infrastructure.threading.async_loop_thread import AsyncLoopThread
from answerlens.infrastructure.ui.qt_selection_surface import QtSelectionSurface
from answerlens.presentation.main_window import MainWindow


def main() -> int:
    app = QApplication(sys.argv)
    app.setApplicationName("AnswerLens")

    container = initialize_app()
    logger = container.resolve(ILoggerService)
    settings = container.resolve(ISettingsRepository)
    categories = settings.get_setting("categories", ["exam", "maze"])
    hotkeys = settings.get_setting("hotkeys", {})

    loop_thread = container.resolve(AsyncLoopThread)
    loop_thread.start()

    window = MainWindow(categories, hotkeys)
    surface = QtSelectionSurface(window, logger)
    container.register_instance(ISelectionSurface, surface)

    machine = container.resolve(CaptureSessionStateMachine)
    machine.add_listener(surface.publish_outcome)

    def dispatch(command):
        loop_thread.submit(machine.handle(command))

    def escape():
        # Esc closes whichever of the overlay and the popup is open
        dispatch(CancelSelection())
        dispatch(CloseAnswer())

    surface.set_command_sink(dispatch)
    window.command_requested.connect(dispatch)
    window.escape_requested.connect(escape)
    window.reload_requested.connect(lambda category: loop_thread.call_soon(machine.reload_corpus, category))

    hotkey_manager = container.resolve(HotkeyManager)
    for category, keys in hotkeys.items():
        if category in categories:
            hotkey_manager.bind(keys, lambda c=category: dispatch(RecognizeWithSavedRegion(c)))
    hotkey_manager.bind(settings.get_setting("cancel_hotkey", "<esc>"), escape)
    hotkey_manager.start()

    def shutdown():
        hotkey_manager.stop()
        machine.remove_listener(surface.publish_outcome)
        loop_thread.call_soon(machine.shutdown)
        loop_thread.stop()
        logger.info("AnswerLens stopped")

    app.aboutToQuit.connect(shutdown)

    loop_thread.submit(machine.load_regions(categories))
    window.show()
    logger.info("AnswerLens started", categories=",".join(categories))

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
