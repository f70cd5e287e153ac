"""LayoutManager: Manages main window layout and sidebar resizing."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QFrame,
    QHBoxLayout,
    QMainWindow,
    QVBoxLayout,
    QWidget,
)

from app.views.constants import RESIZE_HANDLE_WIDTH_PX, WINDOW_SIZE_RATIO
from core.services.panel_resize import ResizablePanelController


class SidebarResizeHandle(QFrame):
    """Thin vertical strip that forwards pointer drags to a resize controller."""

    def __init__(self, controller: ResizablePanelController, parent: QWidget | None = None):
        super().__init__(parent)
        self._controller = controller
        self.setFixedWidth(RESIZE_HANDLE_WIDTH_PX)
        self.setCursor(Qt.SplitHCursor)
        self.setStyleSheet("QFrame:hover { background: #f97316; }")

    def mousePressEvent(self, event) -> None:  # noqa: N802 - Qt override
        if event.button() == Qt.LeftButton:
            self._controller.pointer_down(int(event.globalPosition().x()))
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:  # noqa: N802 - Qt override
        if self._controller.is_dragging:
            self._controller.pointer_move(int(event.globalPosition().x()))
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:  # noqa: N802 - Qt override
        if self._controller.is_dragging:
            self._controller.pointer_up()
            event.accept()
            return
        super().mouseReleaseEvent(event)


class LayoutManager:
    """Manages main window layout and sidebar width.

    The sidebar width is owned by a `ResizablePanelController`; the handle
    between sidebar and map feeds it pointer events and the manager applies
    the clamped width to the sidebar widget.
    """

    def __init__(self, main_window: QMainWindow, resize: ResizablePanelController) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to manage layout for
            resize: Controller holding the sidebar width and its bounds
        """
        self.window = main_window
        self.resize = resize
        self.sidebar: QWidget | None = None
        self.handle: SidebarResizeHandle | None = None

    def setup_main_layout(
        self, sidebar: QWidget, map_pane: QWidget, details: QWidget | None = None
    ) -> QWidget:
        """Create the horizontal sidebar | handle | map | details layout.

        Returns:
            Central widget configured with the layout
        """
        central = QWidget(self.window)
        root = QHBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        self.sidebar = sidebar
        self.sidebar.setFixedWidth(self.resize.width)
        self.handle = SidebarResizeHandle(self.resize, central)

        root.addWidget(sidebar)
        root.addWidget(self.handle)
        root.addWidget(map_pane, 1)
        if details is not None:
            root.addWidget(details)
        return central

    def apply_sidebar_width(self, width: int) -> None:
        """Resize callback for the panel controller."""
        if self.sidebar is not None:
            self.sidebar.setFixedWidth(width)

    def setup_initial_window_size(self) -> None:
        """Setup initial window size based on screen dimensions."""
        screen = QApplication.primaryScreen()
        if screen is not None:
            rect = screen.availableGeometry()
            self.window.resize(
                int(rect.width() * WINDOW_SIZE_RATIO), int(rect.height() * WINDOW_SIZE_RATIO)
            )

    @staticmethod
    def create_section() -> tuple[QWidget, QVBoxLayout]:
        """Create an empty vertical section widget.

        Returns:
            The widget and its layout
        """
        widget = QWidget()
        layout = QVBoxLayout(widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        return widget, layout
