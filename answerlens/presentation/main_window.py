# answerlens/presentation/main_window.py
"""
Main interaction window: one panel per knowledge-base category.

The window never talks to the state machine directly. Button clicks are
published as commands through ``command_requested`` and outcomes come
back through ``apply_outcome`` on the GUI thread.
"""
from typing import Dict, Optional, Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QMainWindow, QVBoxLayout, QWidget

from answerlens.domain.models.geometry import PhysicalRect
from answerlens.domain.models.session import (
    NoRegionConfiguredOutcome, RecognitionFailed, RecognizeWithSavedRegion,
    RegionLoaded, RegionSaved, RequestDefineRegion, RequestSnipRecognize
)
from answerlens.presentation.components.ui_components import GroupHeader, StatusLabel, StyledButton


def describe_region(rect: Optional[PhysicalRect]) -> str:
    if rect is None:
        return "No region set"
    return f"Region {rect.width}x{rect.height} at ({rect.left}, {rect.top})"


class CategoryPanel(GroupHeader):
    """Buttons and region/status display for a single category."""

    def __init__(self, category: str, window: 'MainWindow'):
        super().__init__(category.capitalize())
        self.category = category

        layout = QVBoxLayout(self)

        self.region_label = QLabel(describe_region(None))
        layout.addWidget(self.region_label)

        buttons = QHBoxLayout()
        self.define_btn = StyledButton("Set region", variant="secondary")
        self.define_btn.clicked.connect(
            lambda: window.command_requested.emit(RequestDefineRegion(category)))
        buttons.addWidget(self.define_btn)

        self.recognize_btn = StyledButton("Recognize")
        self.recognize_btn.setEnabled(False)
        self.recognize_btn.clicked.connect(
            lambda: window.command_requested.emit(RecognizeWithSavedRegion(category)))
        buttons.addWidget(self.recognize_btn)

        self.snip_btn = StyledButton("Snip", variant="secondary")
        self.snip_btn.setToolTip("Draw an area and recognize it once")
        self.snip_btn.clicked.connect(
            lambda: window.command_requested.emit(RequestSnipRecognize(category)))
        buttons.addWidget(self.snip_btn)

        self.reload_btn = StyledButton("Reload questions", variant="secondary")
        self.reload_btn.clicked.connect(lambda: window.reload_requested.emit(category))
        buttons.addWidget(self.reload_btn)

        layout.addLayout(buttons)

        self.status_label = StatusLabel("Ready")
        layout.addWidget(self.status_label)

    def set_region(self, rect: Optional[PhysicalRect]) -> None:
        self.region_label.setText(describe_region(rect))
        self.recognize_btn.setEnabled(rect is not None)

    def set_status(self, text: str) -> None:
        self.status_label.setText(text)


class MainWindow(QMainWindow):
    command_requested = Signal(object)  # Command
    reload_requested = Signal(str)      # category
    escape_requested = Signal()

    def __init__(self, categories: Sequence[str], hotkeys: Optional[Dict[str, str]] = None):
        super().__init__()
        self.setWindowTitle("AnswerLens")
        self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)

        central = QWidget()
        layout = QVBoxLayout(central)

        self.panels: Dict[str, CategoryPanel] = {}
        for category in categories:
            panel = CategoryPanel(category, self)
            self.panels[category] = panel
            layout.addWidget(panel)

        if hotkeys:
            hint = ", ".join(f"{category}: {keys}" for category, keys in hotkeys.items())
            hint_label = StatusLabel(f"Hotkeys - {hint}")
            layout.addWidget(hint_label)

        self.setCentralWidget(central)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape:
            self.escape_requested.emit()
        else:
            super().keyPressEvent(event)

    def set_status(self, category: str, text: str) -> None:
        panel = self.panels.get(category)
        if panel:
            panel.set_status(text)

    def apply_outcome(self, outcome) -> None:
        """Reflect a state machine outcome in the panels."""
        panel = self.panels.get(getattr(outcome, "category", None))
        if panel is None:
            return

        if isinstance(outcome, (RegionLoaded, RegionSaved)):
            panel.set_region(outcome.rect)
        elif isinstance(outcome, NoRegionConfiguredOutcome):
            panel.set_region(None)
            panel.set_status(outcome.message)
        elif isinstance(outcome, RecognitionFailed):
            panel.set_status(f"{outcome.kind} error: {outcome.reason}")
