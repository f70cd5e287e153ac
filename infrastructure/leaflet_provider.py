"""Leaflet map provider rendered inside a `QWebEngineView`.

Implements the `MapProvider` capability by driving a small JavaScript
facade (`window.nodeMap`) in an embedded page. Marker clicks come back
through a `QWebChannel` bridge.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import itertools
import json
from string import Template
from typing import Any

from PySide6.QtCore import QObject, QUrl, Slot
from PySide6.QtWebChannel import QWebChannel
from PySide6.QtWebEngineCore import QWebEngineSettings
from PySide6.QtWebEngineWidgets import QWebEngineView
from loguru import logger

from core.models import GeoPoint
from core.services.interfaces import (
    Insets,
    MapOptions,
    MapProvider,
    MarkerOptions,
    ProviderLoadError,
)

MAP_HANDLE = "map"
POPUP_HANDLE = "popup"

_PAGE = Template(
    """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8" />
<link rel="stylesheet" href="$leaflet_css" />
<script src="$leaflet_js"></script>
<script src="qrc:///qtwebchannel/qwebchannel.js"></script>
<style>html, body, #map { margin: 0; height: 100%; width: 100%; background: #111827; }</style>
</head>
<body>
<div id="map"></div>
<script>
var bridge = null;
if (typeof QWebChannel !== 'undefined') {
  new QWebChannel(qt.webChannelTransport, function (channel) { bridge = channel.objects.bridge; });
}
window.nodeMap = {
  map: null, markers: {}, popup: null,
  createMap: function (lat, lng, zoom, tileUrl, attribution) {
    this.map = L.map('map').setView([lat, lng], zoom);
    if (tileUrl) { L.tileLayer(tileUrl, { attribution: attribution || '' }).addTo(this.map); }
  },
  createPopup: function () { this.popup = L.popup({ minWidth: 200 }); },
  addMarker: function (id, lat, lng, title, color) {
    var m = L.circleMarker([lat, lng], {
      radius: 8, fillColor: color, fillOpacity: 1, color: '#ffffff', weight: 2
    }).addTo(this.map);
    m.bindTooltip(title);
    m.on('click', function () { if (bridge) { bridge.markerActivated(id); } });
    this.markers[id] = m;
  },
  removeMarker: function (id) {
    var m = this.markers[id];
    if (m) { this.map.removeLayer(m); delete this.markers[id]; }
  },
  fitBounds: function (points, pad) {
    if (!points.length) { return; }
    this.map.flyToBounds(L.latLngBounds(points), {
      paddingTopLeft: [pad[3], pad[0]], paddingBottomRight: [pad[1], pad[2]]
    });
  },
  panTo: function (lat, lng, zoom) { this.map.setView([lat, lng], zoom); },
  openPopup: function (id, html) {
    var m = this.markers[id];
    if (m && this.popup) { this.popup.setLatLng(m.getLatLng()).setContent(html).openOn(this.map); }
  },
  closePopup: function () { if (this.map) { this.map.closePopup(); } }
};
</script>
</body>
</html>
"""
)


class _Bridge(QObject):
    """Object exposed to the page as `bridge`."""

    def __init__(self, on_marker: Callable[[int], None]) -> None:
        super().__init__()
        self._on_marker = on_marker

    @Slot(int)
    def markerActivated(self, marker_id: int) -> None:  # noqa: N802 - JS facing name
        self._on_marker(marker_id)


class LeafletWebProvider(MapProvider):
    """`MapProvider` backed by Leaflet in a Qt WebEngine page."""

    def __init__(self, view: QWebEngineView, *, leaflet_js: str, leaflet_css: str) -> None:
        self._view = view
        self._leaflet_js = leaflet_js
        self._leaflet_css = leaflet_css
        self._ids = itertools.count(1)
        self._activations: dict[int, Callable[[], None]] = {}
        self._load_callbacks: tuple[Callable[[], None], Callable[[Exception], None]] | None = None

        page = view.page()
        page.settings().setAttribute(
            QWebEngineSettings.WebAttribute.LocalContentCanAccessRemoteUrls, True
        )
        self._bridge = _Bridge(self._dispatch_activation)
        self._channel = QWebChannel(page)
        self._channel.registerObject("bridge", self._bridge)
        page.setWebChannel(self._channel)
        view.loadFinished.connect(self._on_load_finished)

    # Loading

    def load_provider(
        self, on_ready: Callable[[], None], on_error: Callable[[Exception], None]
    ) -> None:
        self._load_callbacks = (on_ready, on_error)
        html = _PAGE.substitute(leaflet_js=self._leaflet_js, leaflet_css=self._leaflet_css)
        self._view.setHtml(html, QUrl("qrc:///"))

    def unload_provider(self) -> None:
        self._activations.clear()
        self._load_callbacks = None
        self._view.setHtml("")

    def _on_load_finished(self, ok: bool) -> None:
        callbacks, self._load_callbacks = self._load_callbacks, None
        if callbacks is None:
            return
        on_ready, on_error = callbacks
        if not ok:
            on_error(ProviderLoadError("Map page failed to load"))
            return

        def _check(has_leaflet: Any) -> None:
            if has_leaflet:
                on_ready()
            else:
                on_error(ProviderLoadError("Failed to load Leaflet script"))

        self._view.page().runJavaScript("typeof L !== 'undefined'", 0, _check)

    # Map operations

    def _call(self, function: str, *args: Any) -> None:
        script = f"nodeMap.{function}({', '.join(json.dumps(a) for a in args)});"
        self._view.page().runJavaScript(script)

    def create_map(self, anchor: Any, options: MapOptions) -> Any:
        self._call(
            "createMap",
            options.center.latitude,
            options.center.longitude,
            options.zoom,
            options.tile_url,
            options.tile_attribution,
        )
        return MAP_HANDLE

    def create_marker(self, map_handle: Any, point: GeoPoint, options: MarkerOptions) -> Any:
        marker_id = next(self._ids)
        if options.on_activate is not None:
            self._activations[marker_id] = options.on_activate
        self._call(
            "addMarker", marker_id, point.latitude, point.longitude, options.title, options.color
        )
        return marker_id

    def remove_marker(self, marker_handle: Any) -> None:
        self._activations.pop(marker_handle, None)
        self._call("removeMarker", marker_handle)

    def fit_bounds(self, map_handle: Any, points: Sequence[GeoPoint], insets: Insets) -> None:
        coords = [[p.latitude, p.longitude] for p in points]
        self._call("fitBounds", coords, [insets.top, insets.right, insets.bottom, insets.left])

    def pan_to(self, map_handle: Any, point: GeoPoint, zoom: int) -> None:
        self._call("panTo", point.latitude, point.longitude, zoom)

    def create_popup(self) -> Any:
        self._call("createPopup")
        return POPUP_HANDLE

    def open_popup(self, popup_handle: Any, anchor: Any, html: str) -> None:
        self._call("openPopup", anchor, html)

    def close_popup(self, popup_handle: Any) -> None:
        self._call("closePopup")

    def _dispatch_activation(self, marker_id: int) -> None:
        handler = self._activations.get(marker_id)
        if handler is None:
            logger.debug("Activation for unknown marker {}", marker_id)
            return
        handler()
