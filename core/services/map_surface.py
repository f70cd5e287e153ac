"""MapSurfaceController: owns the lifecycle of the external map surface.

All marker, camera and popup operations go through this controller so the
rest of the application never talks to the map SDK directly. Marker
operations are only legal once the map is ready; earlier requests are
logged and ignored (orchestration defers them instead).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from loguru import logger

from core.models import GeoPoint, LocationRecord
from core.services.interfaces import (
    Insets,
    MapOptions,
    MapProvider,
    MarkerOptions,
    PopupRenderer,
)
from core.services.popup_content import render_popup_html
from core.services.provider_bootstrap import ProviderBootstrap

DEFAULT_CENTER = GeoPoint(latitude=12.8797, longitude=121.7740)
DEFAULT_ZOOM = 6
FOCUS_ZOOM = 15
FIT_PADDING = 50
MARKER_COLOR = "#22c55e"


class MapState(Enum):
    UNINITIALIZED = "uninitialized"
    PROVIDER_LOADING = "provider_loading"
    PROVIDER_READY = "provider_ready"
    MAP_INITIALIZING = "map_initializing"
    MAP_READY = "map_ready"
    UNAVAILABLE = "unavailable"
    DISPOSED = "disposed"


@dataclass
class _LiveMarker:
    handle: Any
    record: LocationRecord


class MapSurfaceController:
    """Drives one map view through provider load, construction and marker updates."""

    def __init__(
        self,
        provider: MapProvider,
        anchor: Any,
        *,
        options: MapOptions | None = None,
        focus_zoom: int = FOCUS_ZOOM,
        insets: Insets | None = None,
        marker_color: str = MARKER_COLOR,
        bootstrap: ProviderBootstrap | None = None,
        popup_renderer: PopupRenderer | None = None,
        on_ready: Callable[[], None] | None = None,
        on_unavailable: Callable[[Exception], None] | None = None,
        on_marker_activated: Callable[[LocationRecord], None] | None = None,
    ) -> None:
        """Create a controller; nothing is loaded until `mount()`.

        Args:
            provider: Map capability implementation.
            anchor: View object the map is created against.
            options: Default camera; country-level view when omitted.
            focus_zoom: Zoom used by `focus_on`.
            insets: Margin kept around fitted marker bounds.
            marker_color: Fill color of every marker.
            bootstrap: Provider load guard; the process-wide one by default.
            popup_renderer: Builds popup HTML for a record.
            on_ready: Called once the map is ready for markers.
            on_unavailable: Called when the map cannot be shown this session.
            on_marker_activated: Called after a marker's popup is opened.
        """
        self._provider = provider
        self._anchor = anchor
        self._options = options or MapOptions(center=DEFAULT_CENTER, zoom=DEFAULT_ZOOM)
        self._focus_zoom = focus_zoom
        self._insets = insets or Insets.uniform(FIT_PADDING)
        self._marker_color = marker_color
        self._bootstrap = bootstrap or ProviderBootstrap.for_provider(provider)
        self._render_popup = popup_renderer or render_popup_html
        self._on_ready = on_ready
        self._on_unavailable = on_unavailable
        self._on_marker_activated = on_marker_activated

        self._state = MapState.UNINITIALIZED
        self._ticket: int | None = None
        self._map: Any = None
        self._popup: Any = None
        self._popup_open = False
        self._markers: dict[Any, _LiveMarker] = {}
        self._generation = 0
        self._replacing = False
        self.error: Exception | None = None

    # Introspection

    @property
    def state(self) -> MapState:
        return self._state

    @property
    def is_ready(self) -> bool:
        """True when marker operations are legal."""
        return self._state is MapState.MAP_READY

    @property
    def live_marker_count(self) -> int:
        return len(self._markers)

    @property
    def marker_ids(self) -> list[Any]:
        """Record ids of live markers, in creation order."""
        return list(self._markers)

    @property
    def generation(self) -> int:
        """Number of completed marker-set replacements."""
        return self._generation

    # Lifecycle

    def mount(self) -> None:
        """Start provider bootstrap; subsequent calls are ignored."""
        if self._state is not MapState.UNINITIALIZED:
            logger.debug("Map surface already mounted (state={})", self._state.value)
            return
        self._state = MapState.PROVIDER_LOADING
        self._ticket = self._bootstrap.acquire(self._on_provider_ready, self._on_provider_failed)

    def teardown(self) -> None:
        """Release markers, popup, map handle and the provider; idempotent."""
        if self._state is MapState.DISPOSED:
            return
        self._clear_markers()
        if self._popup is not None:
            try:
                self._provider.close_popup(self._popup)
            except Exception as ex:  # pragma: no cover - provider specific
                logger.warning("Closing popup failed during teardown: {}", ex)
            self._popup = None
            self._popup_open = False
        self._map = None
        if self._ticket is not None:
            self._bootstrap.release(self._ticket)
            self._ticket = None
        self._state = MapState.DISPOSED
        logger.debug("Map surface torn down")

    def _on_provider_ready(self) -> None:
        if self._state is not MapState.PROVIDER_LOADING:
            return
        self._state = MapState.PROVIDER_READY
        self._initialize_map()

    def _on_provider_failed(self, error: Exception) -> None:
        if self._state is not MapState.PROVIDER_LOADING:
            return
        self._mark_unavailable(error)

    def _initialize_map(self) -> None:
        self._state = MapState.MAP_INITIALIZING
        try:
            self._map = self._provider.create_map(self._anchor, self._options)
            self._popup = self._provider.create_popup()
        except Exception as ex:
            logger.error("Error initializing map: {}", ex)
            self._map = None
            self._popup = None
            self._mark_unavailable(ex)
            return

        self._state = MapState.MAP_READY
        logger.info("Map ready")
        if self._on_ready:
            self._on_ready()

    def _mark_unavailable(self, error: Exception) -> None:
        self._state = MapState.UNAVAILABLE
        self.error = error
        logger.error("Map unavailable: {}", error)
        if self._on_unavailable:
            self._on_unavailable(error)

    # Marker operations

    def replace_markers(self, records: Iterable[LocationRecord]) -> bool:
        """Replace every live marker with one per mappable record.

        The previous generation is fully removed before the new one is
        created, and a failed creation removes the partial generation, so
        callers never observe a mixed marker set. An open shared popup is
        closed first since its anchor marker is about to be removed.

        Args:
            records: Records to show; unmappable records and repeated ids are skipped.

        Returns:
            True if the marker set was replaced, False when the map is not ready.
        """
        if not self.is_ready:
            logger.warning("Map not ready, ignoring marker update")
            return False
        if self._replacing:
            raise RuntimeError("replace_markers is not re-entrant")

        self._replacing = True
        try:
            self.close_popup()
            self._clear_markers()
            points: list[GeoPoint] = []
            try:
                for record in records:
                    if record.point is None:
                        continue
                    if record.id in self._markers:
                        logger.warning("Duplicate location id {} skipped", record.id)
                        continue
                    handle = self._provider.create_marker(
                        self._map,
                        record.point,
                        MarkerOptions(
                            title=record.group_name,
                            color=self._marker_color,
                            on_activate=self._activation_handler(record.id),
                        ),
                    )
                    self._markers[record.id] = _LiveMarker(handle=handle, record=record)
                    points.append(record.point)
            except Exception:
                logger.exception("Marker creation failed, discarding partial marker set")
                self._clear_markers()
                raise

            self._generation += 1
            logger.debug("Marker generation {}: {} markers", self._generation, len(points))
            if points:
                self._provider.fit_bounds(self._map, points, self._insets)
            return True
        finally:
            self._replacing = False

    def focus_on(self, record: LocationRecord) -> bool:
        """Center on `record` at the focus zoom and open its popup.

        Returns:
            True if the camera moved, False when not ready or not mappable.
        """
        if not self.is_ready:
            logger.warning("Map not ready, ignoring focus request")
            return False
        if record.point is None:
            return False

        self._provider.pan_to(self._map, record.point, self._focus_zoom)
        if record.id in self._markers:
            self.activate(record.id)
        return True

    def activate(self, record_id: Any) -> bool:
        """Open the shared popup on the live marker for `record_id`."""
        if not self.is_ready:
            return False
        marker = self._markers.get(record_id)
        if marker is None:
            return False
        if self._popup is not None:
            self._provider.open_popup(self._popup, marker.handle, self._render_popup(marker.record))
            self._popup_open = True
        if self._on_marker_activated:
            self._on_marker_activated(marker.record)
        return True

    def close_popup(self) -> None:
        """Hide the shared popup if it is open."""
        if self.is_ready and self._popup is not None and self._popup_open:
            self._provider.close_popup(self._popup)
            self._popup_open = False

    def _activation_handler(self, record_id: Any) -> Callable[[], None]:
        generation = self._generation + 1

        def _on_activate() -> None:
            # Ignore clicks delivered for markers of an earlier generation.
            if generation != self._generation:
                return
            self.activate(record_id)

        return _on_activate

    def _clear_markers(self) -> None:
        markers, self._markers = self._markers, {}
        for marker in markers.values():
            try:
                self._provider.remove_marker(marker.handle)
            except Exception as ex:  # pragma: no cover - provider specific
                logger.warning("Removing marker failed: {}", ex)
