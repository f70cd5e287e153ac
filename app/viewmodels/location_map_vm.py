"""ViewModel orchestrating data fetch, grouping, selection and the map surface."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from loguru import logger

from app.viewmodels.group_vm import GroupItemVM
from app.viewmodels.location_vm import LocationVM
from core.models import ALL_GROUPS, FetchResult, LocationGroup, LocationRecord
from core.services.grouping_service import LocationGrouper
from core.services.interfaces import MapProvider
from core.services.map_surface import MapState, MapSurfaceController
from core.services.selection_service import SelectionCoordinator, filter_groups

FetchStarter = Callable[[Callable[[FetchResult], None]], None]


class LocationMapVM:
    """Location map view-model.

    Starts the map surface and the data fetch together on `mount()` and
    populates markers from whichever of the two finishes last. Later
    selection changes are forwarded to the map surface once each.
    """

    def __init__(
        self,
        start_fetch: FetchStarter,
        provider: MapProvider,
        anchor: Any = None,
        *,
        map_options: dict[str, Any] | None = None,
        grouper: LocationGrouper | None = None,
        on_changed: Callable[[], None] | None = None,
        on_error: Callable[[str], None] | None = None,
        on_add_location: Callable[[], None] | None = None,
    ) -> None:
        """Create a LocationMapVM.

        Args:
            start_fetch: Starts an asynchronous fetch and later calls its
                argument with the `FetchResult` on the UI thread.
            provider: Map capability used by the map surface.
            anchor: View object the map is created against.
            map_options: Extra keyword arguments for `MapSurfaceController`.
            grouper: Grouping service (defaults to `LocationGrouper`).
            on_changed: Called whenever view-visible state changes.
            on_error: Called with a message when a fetch or the map fails.
            on_add_location: Called when the user asks to add a new location.
        """
        self._start_fetch = start_fetch
        self._grouper = grouper or LocationGrouper()
        self._on_changed = on_changed
        self._on_error = on_error
        self._on_add_location = on_add_location

        self.map = MapSurfaceController(
            provider,
            anchor,
            on_ready=self._on_map_ready,
            on_unavailable=self._on_map_unavailable,
            on_marker_activated=self._on_marker_activated,
            **(map_options or {}),
        )
        self.selection = SelectionCoordinator(
            on_visible_changed=self._on_visible_changed, on_focus=self._on_focus
        )

        self.records: list[LocationRecord] = []
        self.groups: list[LocationGroup] = []
        self.is_loading = False
        self.last_error: str | None = None
        self.selected_record: LocationRecord | None = None
        self._mounted = False
        self._data_ready = False
        self._markers_pending = False
        self._load_id = 0

    # Lifecycle

    def mount(self) -> None:
        """Start map bootstrap and data fetch concurrently."""
        if self._mounted:
            return
        self._mounted = True
        self.map.mount()
        self._begin_fetch()

    def unmount(self) -> None:
        """Drop interest in pending callbacks and release the map surface."""
        if not self._mounted:
            return
        self._mounted = False
        self.is_loading = False
        self.map.teardown()

    def refresh(self) -> None:
        """Re-fetch locations, e.g. after a new location was saved."""
        if not self._mounted:
            return
        self._begin_fetch()

    def _begin_fetch(self) -> None:
        self._load_id += 1
        load_id = self._load_id
        self.is_loading = True
        self._notify()
        logger.info("Fetching locations (load {})", load_id)
        self._start_fetch(lambda result: self._on_fetch_complete(load_id, result))

    def _on_fetch_complete(self, load_id: int, result: FetchResult) -> None:
        if not self._mounted:
            logger.debug("Fetch {} completed after unmount, ignored", load_id)
            return
        if load_id != self._load_id:
            logger.debug("Stale fetch {} ignored", load_id)
            return

        self.is_loading = False
        if result.success:
            records = list(result.records)
            self.last_error = None
        else:
            message = result.message or "Failed to load locations"
            logger.error("Error loading locations: {}", message)
            records = []
            self.last_error = message

        self.records = records
        self.groups = self._grouper.group(records)
        unmappable = self._grouper.count_unmappable(records)
        logger.info(
            "Loaded {} locations in {} groups ({} not mappable)",
            len(records),
            len(self.groups),
            unmappable,
        )
        self._data_ready = True
        self.selection.set_data(records, self.groups)
        self._notify()
        if self.last_error and self._on_error:
            self._on_error(self.last_error)

    # Map surface callbacks

    def _on_map_ready(self) -> None:
        if not self._mounted:
            return
        if self._data_ready:
            self._markers_pending = False
            self.map.replace_markers(self.selection.visible_records)
        self._notify()

    def _on_map_unavailable(self, error: Exception) -> None:
        if not self._mounted:
            return
        self._notify()
        if self._on_error:
            self._on_error(f"Map unavailable: {error}")

    def _on_marker_activated(self, record: LocationRecord) -> None:
        self.selected_record = record
        self._notify()

    # Selection callbacks

    def _on_visible_changed(self, visible: list[LocationRecord]) -> None:
        if self.selected_record is not None:
            current = next((r for r in visible if r.id == self.selected_record.id), None)
            if current is None:
                logger.debug("Selected location {} no longer visible", self.selected_record.id)
            self.selected_record = current
        if self.map.is_ready:
            self._markers_pending = False
            self.map.replace_markers(visible)
        else:
            # Applied from _on_map_ready using the latest visible set.
            self._markers_pending = True
            logger.debug("Marker update deferred until map is ready")

    def _on_focus(self, record: LocationRecord) -> None:
        self.map.focus_on(record)

    # User actions

    def select_group(self, key: str) -> None:
        """Select a group by name, or `ALL_GROUPS`."""
        self.selection.select_group(key)
        self._notify()

    def set_search_text(self, text: str) -> None:
        self.selection.set_search_text(text)
        self._notify()

    def focus_record(self, record_id: Any) -> None:
        """Center the map on one listed record and open its popup."""
        self.selection.focus_record(record_id)

    def clear_selected_record(self) -> None:
        """Close the details panel."""
        self.selected_record = None
        self.map.close_popup()
        self._notify()

    def request_add_location(self) -> None:
        """Forward an add-location request to the creation form owner."""
        logger.info("Add location requested")
        if self._on_add_location:
            self._on_add_location()

    # Derived state

    @property
    def active_group(self) -> str:
        return self.selection.state.active_group

    @property
    def visible_records(self) -> list[LocationRecord]:
        return self.selection.visible_records

    @property
    def visible_items(self) -> list[LocationVM]:
        return [LocationVM(r) for r in self.selection.visible_records]

    @property
    def selected_item(self) -> LocationVM | None:
        return LocationVM(self.selected_record) if self.selected_record else None

    @property
    def mappable_count(self) -> int:
        return sum(g.count for g in self.groups)

    @property
    def unmappable_count(self) -> int:
        return self._grouper.count_unmappable(self.records)

    @property
    def map_state(self) -> MapState:
        return self.map.state

    @property
    def map_unavailable(self) -> bool:
        return self.map.state is MapState.UNAVAILABLE

    @property
    def markers_pending(self) -> bool:
        """True while a marker update waits for the map to become ready."""
        return self._markers_pending

    def sidebar_items(self) -> list[GroupItemVM]:
        """An "All" entry followed by the (search-filtered) groups."""
        active = self.active_group
        items = [
            GroupItemVM(
                key=ALL_GROUPS,
                label="All",
                count=self.mappable_count,
                is_selected=active == ALL_GROUPS,
            )
        ]
        for group in filter_groups(self.groups, self.selection.state.search_text):
            items.append(
                GroupItemVM(
                    key=group.group_name,
                    label=group.group_name,
                    count=group.count,
                    is_selected=active == group.group_name,
                )
            )
        return items

    def _notify(self) -> None:
        if self._on_changed:
            self._on_changed()
