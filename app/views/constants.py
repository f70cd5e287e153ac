"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

# Data roles
GROUP_KEY_ROLE: int = Qt.UserRole  # group name or ALL_GROUPS on sidebar group items
RECORD_ID_ROLE: int = Qt.UserRole + 1  # record id on sidebar record items

# Sidebar
SIDEBAR_TITLE: str = "LCP/NAP Locations"
SEARCH_PLACEHOLDER: str = "Search locations…"
RESIZE_HANDLE_WIDTH_PX: int = 4

# Map pane
MAP_TITLE: str = "Map View"
ADD_LOCATION_LABEL: str = "Add LCPNAP"
LOADING_TEXT: str = "Loading map..."
UNAVAILABLE_TEXT: str = "Map unavailable"
ACCENT_COLOR: str = "#ea580c"

# Details panel
DETAILS_PANEL_WIDTH_PX: int = 320

# Window
WINDOW_TITLE: str = "NodeMap - LCP/NAP Locations"
WINDOW_SIZE_RATIO: float = 0.7
