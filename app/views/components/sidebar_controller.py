"""SidebarController: Manages the group list, record list and search box."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QSignalBlocker
from PySide6.QtWidgets import QLabel, QLineEdit, QListWidget, QListWidgetItem, QVBoxLayout, QWidget

from app.viewmodels.group_vm import GroupItemVM
from app.viewmodels.location_vm import LocationVM
from app.views.constants import (
    GROUP_KEY_ROLE,
    RECORD_ID_ROLE,
    SEARCH_PLACEHOLDER,
    SIDEBAR_TITLE,
)


class SidebarController:
    """Builds the sidebar widgets and keeps them in sync with the view-model.

    User interaction is reported through the callbacks passed to
    `connect_handlers`; `refresh` never triggers those callbacks.
    """

    def __init__(self) -> None:
        self.widget = QWidget()
        layout = QVBoxLayout(self.widget)
        layout.setContentsMargins(8, 8, 8, 8)

        title = QLabel(SIDEBAR_TITLE)
        title.setStyleSheet("font-size: 16px; font-weight: 600;")
        layout.addWidget(title)

        self.search = QLineEdit()
        self.search.setPlaceholderText(SEARCH_PLACEHOLDER)
        self.search.setClearButtonEnabled(True)
        layout.addWidget(self.search)

        self.group_list = QListWidget()
        layout.addWidget(self.group_list, 2)

        self.record_header = QLabel("")
        layout.addWidget(self.record_header)

        self.record_list = QListWidget()
        layout.addWidget(self.record_list, 3)

        self.summary = QLabel("")
        self.summary.setWordWrap(True)
        layout.addWidget(self.summary)

    def connect_handlers(
        self,
        on_group_selected: Callable[[str], None],
        on_record_selected: Callable[[object], None],
        on_search_changed: Callable[[str], None],
    ) -> None:
        """Connect list clicks and search edits to view-model actions."""
        self.group_list.itemClicked.connect(
            lambda item: on_group_selected(item.data(GROUP_KEY_ROLE))
        )
        self.record_list.itemClicked.connect(
            lambda item: on_record_selected(item.data(RECORD_ID_ROLE))
        )
        self.search.textChanged.connect(on_search_changed)

    def refresh(
        self,
        groups: list[GroupItemVM],
        records: list[LocationVM],
        summary: str,
    ) -> None:
        """Rebuild both lists from view-model state."""
        with QSignalBlocker(self.group_list):
            self.group_list.clear()
            for group in groups:
                label = f"{group.label}  ({group.count})" if group.count > 0 else group.label
                item = QListWidgetItem(label)
                item.setData(GROUP_KEY_ROLE, group.key)
                self.group_list.addItem(item)
                if group.is_selected:
                    self.group_list.setCurrentItem(item)

        with QSignalBlocker(self.record_list):
            self.record_list.clear()
            for rec in records:
                item = QListWidgetItem(f"{rec.title} — {rec.list_label}")
                item.setToolTip(rec.address)
                item.setData(RECORD_ID_ROLE, rec.record_id)
                self.record_list.addItem(item)

        self.record_header.setText(f"Locations ({len(records)})")
        self.summary.setText(summary)
