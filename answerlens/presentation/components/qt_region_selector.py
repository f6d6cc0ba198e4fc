# answerlens/presentation/components/qt_region_selector.py
"""
Full-desktop overlay for drawing a capture rectangle.

The overlay spans the whole virtual desktop, so the rectangle it reports
is relative to its own top-left corner, in logical pixels. The overlay
also records its absolute origin and the scale factor of the screen the
rectangle was drawn on; together they convert the selection to physical
pixels.
"""
from PySide6.QtCore import Qt, QRect, Signal
from PySide6.QtGui import QPainter, QPen, QColor, QGuiApplication
from PySide6.QtWidgets import QWidget, QLabel

from answerlens.domain.models.geometry import LogicalRect, WindowOrigin
from answerlens.domain.models.session import CaptureMode


INSTRUCTIONS = {
    CaptureMode.DEFINE_REGION: "Drag to mark the question area for '{category}'. Press Esc to cancel.",
    CaptureMode.RECOGNIZE: "Drag over the question to recognize it. Press Esc to cancel.",
}


def virtual_desktop_geometry() -> QRect:
    """Bounding rectangle of every screen, in logical pixels."""
    screens = QGuiApplication.screens()
    geometry = QRect(screens[0].geometry())
    for screen in screens[1:]:
        geometry = geometry.united(screen.geometry())
    return geometry


class QtRegionSelector(QWidget):
    """
    A borderless, semi-transparent overlay that lets the user click and drag
    to select a rectangular region.
    """
    region_selected = Signal(object)  # LogicalRect relative to the overlay
    selection_cancelled = Signal()

    MIN_SIZE = 5  # smaller drags are treated as stray clicks

    def __init__(self, category: str, mode: CaptureMode, parent=None):
        super().__init__(parent)
        self.category = category
        self.mode = mode

        self.setWindowFlags(
            Qt.FramelessWindowHint |
            Qt.WindowStaysOnTopHint |
            Qt.Tool  # So it doesn't appear in taskbar
        )
        self.setAttribute(Qt.WA_TranslucentBackground)
        self.setAttribute(Qt.WA_DeleteOnClose)

        self.screen_geometry = virtual_desktop_geometry()
        self.setGeometry(self.screen_geometry)
        self.setCursor(Qt.CrossCursor)

        self.start_pos = None
        self.selection_rect = None
        self.is_selecting = False
        self.scale_factor = 1.0

        self.instructions = QLabel(INSTRUCTIONS[mode].format(category=category), self)
        self.instructions.setStyleSheet(
            "color: white; background-color: rgba(0, 0, 0, 150); padding: 10px; border-radius: 5px;"
        )
        self.instructions.setAlignment(Qt.AlignCenter)
        self.instructions.adjustSize()
        self.instructions.move(
            (self.width() - self.instructions.width()) // 2,
            self.height() - self.instructions.height() - 50
        )

        self.dimensions_label = QLabel(self)
        self.dimensions_label.setStyleSheet(
            "color: white; background-color: rgba(0, 0, 0, 150); padding: 5px; border-radius: 3px;"
        )
        self.dimensions_label.hide()

    @property
    def origin(self) -> WindowOrigin:
        """Absolute logical position of the overlay's top-left corner."""
        return WindowOrigin(x=self.screen_geometry.x(), y=self.screen_geometry.y())

    def start(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()
        self.setFocus()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), QColor(0, 0, 0, 80))

        if self.selection_rect:
            # Punch the selection out of the dimmed background
            painter.setCompositionMode(QPainter.CompositionMode_Clear)
            painter.fillRect(self.selection_rect, Qt.transparent)
            painter.setCompositionMode(QPainter.CompositionMode_SourceOver)
            painter.setPen(QPen(QColor(255, 0, 0), 2))
            painter.drawRect(self.selection_rect)

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.is_selecting = True
            self.start_pos = event.position().toPoint()
            self.selection_rect = QRect(self.start_pos, self.start_pos)
            self.update()

    def mouseMoveEvent(self, event):
        if not self.is_selecting:
            return

        pos = event.position().toPoint()
        self.selection_rect = QRect(self.start_pos, pos).normalized()

        self.dimensions_label.setText(f"{self.selection_rect.width()} x {self.selection_rect.height()}")
        self.dimensions_label.adjustSize()
        label_x = min(pos.x() + 15, self.width() - self.dimensions_label.width() - 10)
        label_y = min(pos.y() + 15, self.height() - self.dimensions_label.height() - 10)
        self.dimensions_label.move(label_x, label_y)
        self.dimensions_label.show()
        self.update()

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.LeftButton or not self.is_selecting:
            return
        self.is_selecting = False

        if self.selection_rect.width() > self.MIN_SIZE and self.selection_rect.height() > self.MIN_SIZE:
            self._emit_selection()
        else:
            self.selection_rect = None
            self.dimensions_label.hide()
            self.update()

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape:
            self.selection_cancelled.emit()
        elif event.key() in (Qt.Key_Return, Qt.Key_Enter) and self.selection_rect:
            if self.selection_rect.width() > self.MIN_SIZE and self.selection_rect.height() > self.MIN_SIZE:
                self._emit_selection()

    def _emit_selection(self) -> None:
        rect = self.selection_rect
        # Scale of the screen under the selection's center
        center = self.mapToGlobal(rect.center())
        screen = QGuiApplication.screenAt(center) or QGuiApplication.primaryScreen()
        self.scale_factor = screen.devicePixelRatio()

        self.region_selected.emit(LogicalRect(x=rect.x(), y=rect.y(),
                                              width=rect.width(), height=rect.height()))
