"""Core service interfaces and shared data structures.

This module defines the map rendering capability the core depends on,
the option dataclasses passed through it, and the error types raised at
the two asynchronous boundaries (data fetch and provider load).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from core.models import FetchResult, GeoPoint, LocationRecord


class ProviderLoadError(RuntimeError):
    """The map provider (SDK script/page) could not be loaded."""


class FetchError(RuntimeError):
    """The location backend could not be reached or returned a failure."""


@dataclass(frozen=True)
class MapOptions:
    """Initial camera and styling for a newly created map.

    Attributes:
        center: Default camera center.
        zoom: Default zoom level (country level).
        tile_url: Tile URL template for providers that render raster tiles.
        tile_attribution: Attribution text shown with the tiles.
    """

    center: GeoPoint
    zoom: int = 6
    tile_url: str | None = None
    tile_attribution: str | None = None


@dataclass(frozen=True)
class MarkerOptions:
    """Per-marker presentation and activation callback.

    Attributes:
        title: Tooltip/title text for the marker.
        color: Fill color of the marker symbol.
        on_activate: Invoked by the provider when the user activates the marker.
    """

    title: str
    color: str = "#22c55e"
    on_activate: Callable[[], None] | None = None


@dataclass(frozen=True)
class Insets:
    """Margin kept around fitted bounds, in screen units."""

    top: int = 50
    right: int = 50
    bottom: int = 50
    left: int = 50

    @classmethod
    def uniform(cls, value: int) -> Insets:
        """Insets with the same margin on every side."""
        return cls(value, value, value, value)


class MapProvider:
    """Capability interface over an external map rendering SDK.

    Handles returned by the provider are opaque to the core. Every method is
    called on the UI thread.
    """

    def load_provider(
        self, on_ready: Callable[[], None], on_error: Callable[[Exception], None]
    ) -> None:
        """Start loading the SDK; call exactly one of the callbacks later."""
        raise NotImplementedError

    def unload_provider(self) -> None:
        """Release the SDK once no view uses it any more."""
        raise NotImplementedError

    def create_map(self, anchor: Any, options: MapOptions) -> Any:
        """Create a map instance against the view `anchor` and return its handle."""
        raise NotImplementedError

    def create_marker(self, map_handle: Any, point: GeoPoint, options: MarkerOptions) -> Any:
        """Place a marker at `point` and return its handle."""
        raise NotImplementedError

    def remove_marker(self, marker_handle: Any) -> None:
        """Remove a marker created by `create_marker`."""
        raise NotImplementedError

    def fit_bounds(self, map_handle: Any, points: Sequence[GeoPoint], insets: Insets) -> None:
        """Animate the camera to the smallest region containing `points`."""
        raise NotImplementedError

    def pan_to(self, map_handle: Any, point: GeoPoint, zoom: int) -> None:
        """Center the camera on `point` at `zoom`."""
        raise NotImplementedError

    def create_popup(self) -> Any:
        """Create the shared popup/info-window and return its handle."""
        raise NotImplementedError

    def open_popup(self, popup_handle: Any, anchor: Any, html: str) -> None:
        """Show `html` in the popup anchored to the marker handle `anchor`."""
        raise NotImplementedError

    def close_popup(self, popup_handle: Any) -> None:
        """Hide the popup."""
        raise NotImplementedError


class ILocationRepository:
    """Interface for location data sources."""

    def fetch(self) -> FetchResult:
        """Return all location records; never raises for transport errors."""
        raise NotImplementedError


PopupRenderer = Callable[[LocationRecord], str]
