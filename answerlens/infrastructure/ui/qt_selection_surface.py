# answerlens/infrastructure/ui/qt_selection_surface.py
"""
Qt implementation of the selection surface.

The state machine runs on the event-loop thread, so every call here is
forwarded to the GUI thread through queued signals. Events coming back
from the overlay and popup are turned into commands and handed to the
command sink.
"""
import threading
from typing import Callable, Optional, Tuple, Union

from PySide6.QtCore import QObject, Qt, Signal, Slot
from PySide6.QtGui import QGuiApplication

from answerlens.domain.models.geometry import LogicalRect, PhysicalRect, WindowOrigin
from answerlens.domain.models.knowledge import MatchResult, NotFound
from answerlens.domain.models.session import (
    CancelSelection, CaptureMode, CloseAnswer, Command, Outcome, SelectionCompleted
)
from answerlens.domain.services.i_logger_service import ILoggerService
from answerlens.domain.services.i_selection_surface import ISelectionSurface
from answerlens.presentation.components.answer_window import AnswerWindow
from answerlens.presentation.components.qt_region_selector import QtRegionSelector
from answerlens.presentation.main_window import MainWindow

CommandSink = Callable[[Command], None]


class _QtSurfaceBridge(QObject):
    """Private bridge class to run surface operations on the GUI thread."""
    visibility_signal = Signal(bool)
    open_overlay_signal = Signal(str, object)       # category, CaptureMode
    close_overlay_signal = Signal()
    present_signal = Signal(str, object, object)    # category, result, anchor
    dismiss_signal = Signal()
    status_signal = Signal(str, str)
    outcome_signal = Signal(object)

    def __init__(self, surface: 'QtSelectionSurface'):
        super().__init__()
        self.surface = surface

        self.visibility_signal.connect(self._set_visible_impl, Qt.QueuedConnection)
        self.open_overlay_signal.connect(self._open_overlay_impl, Qt.QueuedConnection)
        self.close_overlay_signal.connect(self._close_overlay_impl, Qt.QueuedConnection)
        self.present_signal.connect(self._present_impl, Qt.QueuedConnection)
        self.dismiss_signal.connect(self._dismiss_impl, Qt.QueuedConnection)
        self.status_signal.connect(self._status_impl, Qt.QueuedConnection)
        self.outcome_signal.connect(self._outcome_impl, Qt.QueuedConnection)

    @Slot(bool)
    def _set_visible_impl(self, visible):
        window = self.surface.main_window
        if visible:
            window.show()
            window.raise_()
        else:
            window.hide()

    @Slot(str, object)
    def _open_overlay_impl(self, category, mode):
        self.surface._open_overlay(category, mode)

    @Slot()
    def _close_overlay_impl(self):
        self.surface._close_overlay()

    @Slot(str, object, object)
    def _present_impl(self, category, result, anchor):
        self.surface.answer_window.show_result(category, result, anchor, self.surface.display_scale())

    @Slot()
    def _dismiss_impl(self):
        self.surface.answer_window.hide()

    @Slot(str, str)
    def _status_impl(self, category, text):
        self.surface.main_window.set_status(category, text)

    @Slot(object)
    def _outcome_impl(self, outcome):
        self.surface.main_window.apply_outcome(outcome)


class QtSelectionSurface(ISelectionSurface):
    """Drives the main window, selection overlay and answer popup."""

    def __init__(self, main_window: MainWindow, logger: ILoggerService,
                 command_sink: Optional[CommandSink] = None):
        """
        Initialize the surface. Must be created on the GUI thread.

        Args:
            main_window: Main interaction window
            logger: Logger service
            command_sink: Receives commands raised by the overlay and popup
        """
        self.main_window = main_window
        self.logger = logger
        self.command_sink = command_sink
        self.answer_window = AnswerWindow()
        self.answer_window.close_requested.connect(lambda: self._send(CloseAnswer()))

        self._overlay: Optional[QtRegionSelector] = None
        self._geometry_lock = threading.Lock()
        self._geometry: Tuple[WindowOrigin, float] = (WindowOrigin(0, 0), 1.0)
        self._bridge = _QtSurfaceBridge(self)

    def set_command_sink(self, command_sink: CommandSink) -> None:
        self.command_sink = command_sink

    def publish_outcome(self, outcome: Outcome) -> None:
        """Outcome listener; safe to call from any thread."""
        self._bridge.outcome_signal.emit(outcome)

    def display_scale(self) -> float:
        screen = QGuiApplication.primaryScreen()
        return screen.devicePixelRatio() if screen else 1.0

    # --- ISelectionSurface ---

    def hide_primary(self) -> None:
        self._bridge.visibility_signal.emit(False)

    def show_primary(self) -> None:
        self._bridge.visibility_signal.emit(True)

    def open_selection_overlay(self, category: str, mode: CaptureMode) -> None:
        self._bridge.open_overlay_signal.emit(category, mode)

    def close_selection_overlay(self) -> None:
        self._bridge.close_overlay_signal.emit()

    def selection_geometry(self) -> Tuple[WindowOrigin, float]:
        with self._geometry_lock:
            return self._geometry

    def present_answer(self, category: str, result: Union[MatchResult, NotFound],
                       anchor: Optional[PhysicalRect]) -> None:
        self._bridge.present_signal.emit(category, result, anchor)

    def dismiss_answer(self) -> None:
        self._bridge.dismiss_signal.emit()

    def show_status(self, category: str, text: str) -> None:
        self._bridge.status_signal.emit(category, text)

    # --- GUI thread ---

    def _open_overlay(self, category: str, mode: CaptureMode) -> None:
        self._close_overlay()
        overlay = QtRegionSelector(category, mode)
        overlay.region_selected.connect(lambda rect: self._on_region_selected(overlay, rect))
        overlay.selection_cancelled.connect(lambda: self._send(CancelSelection()))
        self._overlay = overlay
        overlay.start()
        self.logger.debug("Selection overlay opened", category=category, mode=mode.value)

    def _close_overlay(self) -> None:
        if self._overlay is not None:
            self._overlay.close()
            self._overlay = None

    def _on_region_selected(self, overlay: QtRegionSelector, rect: LogicalRect) -> None:
        # Geometry must be in place before the command reaches the state machine
        with self._geometry_lock:
            self._geometry = (overlay.origin, overlay.scale_factor)
        self._send(SelectionCompleted(rect))

    def _send(self, command: Command) -> None:
        if self.command_sink is None:
            self.logger.warning(f"No command sink, dropping {type(command).__name__}")
            return
        self.command_sink(command)
