"""Side panel showing the details of the activated location."""

from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from app.viewmodels.location_vm import LocationVM
from app.views.constants import DETAILS_PANEL_WIDTH_PX
from core.models import LocationRecord


class LocationDetailsPanel(QWidget):
    """Read-only details for one `LocationVM`; hidden when nothing is selected."""

    closeRequested = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setFixedWidth(DETAILS_PANEL_WIDTH_PX)

        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)

        header = QHBoxLayout()
        self._title = QLabel("")
        self._title.setStyleSheet("font-size: 15px; font-weight: 600;")
        close_button = QPushButton("✕")
        close_button.setFixedSize(28, 28)
        close_button.clicked.connect(self.closeRequested.emit)
        header.addWidget(self._title, 1)
        header.addWidget(close_button)
        root.addLayout(header)

        self._body = QWidget()
        self._form = QFormLayout(self._body)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._body)
        root.addWidget(scroll, 1)

        self._record: LocationRecord | None = None
        self.setVisible(False)

    def set_item(self, item: LocationVM | None) -> None:
        """Show `item`, or hide the panel for None."""
        if item is None:
            self._record = None
            self.setVisible(False)
            return
        if item.record == self._record and self.isVisible():
            return

        self._record = item.record
        self._title.setText(item.title)
        while self._form.rowCount():
            self._form.removeRow(0)
        for label, value in item.detail_rows():
            text = QLabel(value)
            text.setWordWrap(True)
            text.setTextInteractionFlags(Qt.TextSelectableByMouse)
            self._form.addRow(f"{label}:", text)
        self.setVisible(True)
