# answerlens/presentation/components/ui_components.py
from PySide6.QtWidgets import QPushButton, QLabel, QGroupBox

_BUTTON_COLORS = {
    "primary": ("#3a7ca5", "#2a6b94", "#1a5a83"),
    "secondary": ("#6c757d", "#5a6268", "#4e555b"),
}


class StyledButton(QPushButton):
    """Flat colored button; variant is 'primary' or 'secondary'."""
    def __init__(self, text, parent=None, variant="primary"):
        super().__init__(text, parent)
        base, hover, pressed = _BUTTON_COLORS.get(variant, _BUTTON_COLORS["primary"])
        self.setStyleSheet(f"""
            QPushButton {{
                background-color: {base};
                color: white;
                padding: 6px 12px;
                border-radius: 4px;
            }}
            QPushButton:hover {{ background-color: {hover}; }}
            QPushButton:pressed {{ background-color: {pressed}; }}
            QPushButton:disabled {{ background-color: #b0b0b0; }}
        """)


class GroupHeader(QGroupBox):
    """Bordered box titled with a category name."""
    def __init__(self, title, parent=None):
        super().__init__(title, parent)
        self.setStyleSheet("""
            QGroupBox {
                font-weight: bold;
                border: 1px solid #cccccc;
                border-radius: 6px;
                margin-top: 10px;
                padding-top: 15px;
            }
            QGroupBox::title {
                subcontrol-origin: margin;
                subcontrol-position: top left;
                padding: 0 5px;
            }
        """)


class StatusLabel(QLabel):
    """Single-line muted status text."""
    def __init__(self, text="", parent=None):
        super().__init__(text, parent)
        self.setStyleSheet("color: #555555; font-size: 9pt;")
        self.setWordWrap(True)
