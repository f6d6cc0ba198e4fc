# answerlens/presentation/components/answer_window.py
"""
Popup showing the answer beside the captured region.
"""
import html
from typing import Optional, Tuple, Union

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from answerlens.domain.models.geometry import PhysicalRect
from answerlens.domain.models.knowledge import (
    MatchResult, NotFound, OptionListAnswer, SimpleAnswer
)

POPUP_GAP = 20


def popup_position(anchor: Optional[PhysicalRect], scale: float = 1.0,
                   gap: int = POPUP_GAP) -> Optional[Tuple[int, int]]:
    """
    Logical top-left for the popup, just right of the captured region.

    Returns:
        None when there is no anchor, so the window manager places it
    """
    if anchor is None:
        return None
    scale = scale if scale > 0 else 1.0
    return (int((anchor.left + anchor.width + gap) / scale), int(anchor.top / scale))


def render_answer_html(result: Union[MatchResult, NotFound]) -> str:
    """Rich text body for a match or a not-found echo."""
    if isinstance(result, NotFound):
        echoed = html.escape(result.echoed_text) or "(empty)"
        return (
            "<p style='color:#c0392b; font-weight:bold;'>No matching question found</p>"
            f"<p style='color:#888;'>Recognized: {echoed}</p>"
        )

    entry = result.entry
    parts = [f"<p style='color:#888;'>{html.escape(entry.question)}</p>"]
    answer = entry.answer

    if isinstance(answer, SimpleAnswer):
        parts.append(f"<p style='font-size:16pt; font-weight:bold;'>{html.escape(answer.text)}</p>")
    elif isinstance(answer, OptionListAnswer):
        if answer.label:
            parts.append(
                "<p><span style='background-color:#3a7ca5; color:white;'>"
                f"&nbsp;{html.escape(answer.label)}&nbsp;</span></p>"
            )
        for option in answer.options:
            mark = "&#9733; " if option.recommend else ""
            weight = "bold" if option.recommend else "normal"
            parts.append(f"<p style='font-weight:{weight};'>{mark}{html.escape(option.text)}")
            if option.subtitle:
                parts.append(f"<br><span style='color:#888;'>{html.escape(option.subtitle)}</span>")
            parts.append("</p>")

    parts.append(f"<p style='color:#aaa; font-size:8pt;'>matched by {result.tier.value}</p>")
    return "".join(parts)


class AnswerWindow(QWidget):
    """Frameless, always-on-top answer card."""
    close_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowFlags(Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint | Qt.Tool)
        self.setAttribute(Qt.WA_ShowWithoutActivating)
        self.setStyleSheet("background-color: #fdfdfd; border: 1px solid #cccccc; border-radius: 6px;")
        self.setMinimumWidth(280)
        self.setMaximumWidth(480)

        layout = QVBoxLayout(self)
        header = QHBoxLayout()

        self.title_label = QLabel()
        self.title_label.setStyleSheet("font-weight: bold; border: none;")
        header.addWidget(self.title_label, 1)

        close_btn = QPushButton("x")
        close_btn.setFixedSize(22, 22)
        close_btn.setStyleSheet("border: none; color: #888;")
        close_btn.clicked.connect(self.close_requested.emit)
        header.addWidget(close_btn, 0)
        layout.addLayout(header)

        self.body_label = QLabel()
        self.body_label.setTextFormat(Qt.RichText)
        self.body_label.setWordWrap(True)
        self.body_label.setStyleSheet("border: none;")
        layout.addWidget(self.body_label)

    def show_result(self, category: str, result: Union[MatchResult, NotFound],
                    anchor: Optional[PhysicalRect], scale: float = 1.0) -> None:
        self.title_label.setText(category)
        self.body_label.setText(render_answer_html(result))
        self.adjustSize()

        position = popup_position(anchor, scale)
        if position is not None:
            self.move(*position)
        self.show()
        self.raise_()
