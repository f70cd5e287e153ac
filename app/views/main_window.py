"""MainWindow: LCP/NAP location view with sidebar, map and details panel.

The window owns only Qt widgets and wiring; grouping, selection and the
map lifecycle live in `LocationMapVM` and the core services.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedLayout,
    QWidget,
)
from PySide6.QtWebEngineWidgets import QWebEngineView
from loguru import logger

from app.viewmodels.location_map_vm import LocationMapVM
from app.views.components.menu_controller import MenuController
from app.views.components.sidebar_controller import SidebarController
from app.views.constants import (
    ACCENT_COLOR,
    ADD_LOCATION_LABEL,
    LOADING_TEXT,
    MAP_TITLE,
    UNAVAILABLE_TEXT,
    WINDOW_TITLE,
)
from app.views.fetch_tasks import FetchTaskRunner
from app.views.layout.layout_manager import LayoutManager
from app.views.widgets.details_panel import LocationDetailsPanel
from core.models import GeoPoint
from core.services.interfaces import Insets, MapOptions
from core.services.panel_resize import ResizablePanelController
from infrastructure.leaflet_provider import LeafletWebProvider
from infrastructure.logging import open_latest_log, open_log_directory


class MainWindow(QMainWindow):
    """Main application window for the location map view."""

    # Emitted from the fetch worker thread; delivered queued on the GUI thread.
    locationsLoaded = Signal(int, object)
    addLocationRequested = Signal()

    def __init__(self, repo: Any, settings: Any, log_dir: str | None = None) -> None:
        """Initialize MainWindow with services and components.

        Args:
            repo: Location repository with a blocking `fetch()` method
            settings: Settings instance for configuration
            log_dir: Directory opened by the Log menu
        """
        super().__init__()
        self._settings = settings
        self._log_dir = log_dir

        self._setup_components(repo)
        self._setup_ui()
        self._connect_signals()

        self.setWindowTitle(WINDOW_TITLE)
        self.statusBar().showMessage("Ready", 3000)

    def _setup_components(self, repo: Any) -> None:
        """Create the map view, provider, fetch runner and view-model."""
        s = self._settings
        self.map_view = QWebEngineView()
        self.provider = LeafletWebProvider(
            self.map_view,
            leaflet_js=s.get("map.leaflet_js"),
            leaflet_css=s.get("map.leaflet_css"),
        )
        self.fetch_runner = FetchTaskRunner(repo=repo, receiver=self)

        lat, lng = s.get("map.default_center", [12.8797, 121.7740])
        map_options = {
            "options": MapOptions(
                center=GeoPoint(latitude=float(lat), longitude=float(lng)),
                zoom=s.get_int("map.default_zoom", 6),
                tile_url=s.get("map.tile_url"),
                tile_attribution=s.get("map.tile_attribution"),
            ),
            "focus_zoom": s.get_int("map.focus_zoom", 15),
            "insets": Insets.uniform(s.get_int("map.fit_padding", 50)),
            "marker_color": s.get("map.marker_color", "#22c55e"),
        }
        self.vm = LocationMapVM(
            self.fetch_runner.start,
            self.provider,
            self.map_view,
            map_options=map_options,
            on_changed=self.refresh_view,
            on_error=self._on_error,
            on_add_location=self.addLocationRequested.emit,
        )

        self.sidebar = SidebarController()
        self.details = LocationDetailsPanel()
        self.menu_controller = MenuController(self)
        self.resize_controller = ResizablePanelController(
            width=s.get_int("sidebar.width", 256),
            min_width=s.get_int("sidebar.min_width", 200),
            max_width=s.get_int("sidebar.max_width", 500),
            on_resize=self._on_sidebar_resized,
        )
        self.layout_manager = LayoutManager(self, self.resize_controller)

    def _setup_ui(self) -> None:
        """Build the map pane and install the main layout."""
        map_pane, map_layout = LayoutManager.create_section()

        header = QWidget()
        header_row = QHBoxLayout(header)
        title = QLabel(MAP_TITLE)
        title.setStyleSheet("font-size: 16px; font-weight: 600;")
        self.add_button = QPushButton(ADD_LOCATION_LABEL)
        self.add_button.setStyleSheet(
            f"background-color: {ACCENT_COLOR}; color: white; padding: 6px 12px;"
        )
        header_row.addWidget(title, 1)
        header_row.addWidget(self.add_button)
        map_layout.addWidget(header)

        stack_host = QWidget()
        stack = QStackedLayout(stack_host)
        stack.setStackingMode(QStackedLayout.StackAll)
        self.overlay = QLabel(LOADING_TEXT)
        self.overlay.setAlignment(Qt.AlignCenter)
        self.overlay.setStyleSheet("background: rgba(17, 24, 39, 190); color: white;")
        stack.addWidget(self.overlay)
        stack.addWidget(self.map_view)
        map_layout.addWidget(stack_host, 1)

        central = self.layout_manager.setup_main_layout(
            self.sidebar.widget, map_pane, self.details
        )
        self.setCentralWidget(central)
        self.layout_manager.setup_initial_window_size()
        self.menu_controller.setup_menus()

    def _connect_signals(self) -> None:
        """Connect all signal/slot relationships."""
        self.locationsLoaded.connect(self.fetch_runner.deliver)
        self.sidebar.connect_handlers(
            on_group_selected=self.vm.select_group,
            on_record_selected=self.vm.focus_record,
            on_search_changed=self.vm.set_search_text,
        )
        self.add_button.clicked.connect(self.vm.request_add_location)
        self.details.closeRequested.connect(self.vm.clear_selected_record)
        self.menu_controller.connect_actions(
            {
                "refresh": self.vm.refresh,
                "add_location": self.vm.request_add_location,
                "exit": self.close,
                "open_latest_log": lambda: open_latest_log(self._log_dir),
                "open_log_directory": lambda: open_log_directory(self._log_dir),
            }
        )

    def _on_sidebar_resized(self, width: int) -> None:
        self.layout_manager.apply_sidebar_width(width)
        logger.debug("Sidebar width -> {}", width)

    # Public API

    def mount(self) -> None:
        """Start map bootstrap and data loading."""
        self.vm.mount()
        self.refresh_view()

    def refresh_view(self) -> None:
        """Re-render widgets from view-model state."""
        vm = self.vm
        summary = f"{vm.mappable_count} mapped"
        if vm.unmappable_count:
            summary += f", {vm.unmappable_count} without valid coordinates"
        self.sidebar.refresh(vm.sidebar_items(), vm.visible_items, summary)

        if vm.map_unavailable:
            self.overlay.setText(UNAVAILABLE_TEXT)
            self.overlay.setVisible(True)
        elif vm.is_loading or not vm.map.is_ready:
            self.overlay.setText(LOADING_TEXT)
            self.overlay.setVisible(True)
        else:
            self.overlay.setVisible(False)

        self.details.set_item(vm.selected_item)
        self.menu_controller.enable_action("refresh", not vm.is_loading)

    def _on_error(self, message: str) -> None:
        self.statusBar().showMessage(message, 8000)

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
        """Release the map surface and drop pending fetch callbacks."""
        self.fetch_runner.cancel_all()
        self.vm.unmount()
        event.accept()
