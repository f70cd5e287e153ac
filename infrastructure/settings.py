"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULTS: dict[str, Any] = {
    "api": {
        "base_url": "http://localhost:8000/api",
        "locations_endpoint": "/lcp-nap-locations",
        "timeout_seconds": None,
    },
    "map": {
        "default_center": [12.8797, 121.7740],
        "default_zoom": 6,
        "focus_zoom": 15,
        "fit_padding": 50,
        "marker_color": "#22c55e",
        "tile_url": "https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png",
        "tile_attribution": "&copy; OpenStreetMap contributors &copy; CARTO",
        "leaflet_js": "https://unpkg.com/leaflet@1.9.4/dist/leaflet.js",
        "leaflet_css": "https://unpkg.com/leaflet@1.9.4/dist/leaflet.css",
    },
    "sidebar": {"width": 256, "min_width": 200, "max_width": 500},
    "logging": {"level": "INFO", "dir": None},
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class JsonSettings:
    """JSON settings reader with dotted-key access over built-in defaults."""

    def __init__(self, settings_path: str | Path | None = None) -> None:
        data: dict[str, Any] = {}
        self._path = Path(settings_path) if settings_path is not None else None
        if self._path is not None:
            if self._path.exists():
                with self._path.open("r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError(f"settings.json must contain an object: {self._path}")
                data = loaded
            else:
                logger.warning("settings.json not found, using defaults: {}", self._path)
        self._data = _deep_merge(DEFAULTS, data)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_int(self, key: str, default: int) -> int:
        """Return an int for `key`, falling back to `default` on bad values."""
        try:
            return int(self.get(key, default))
        except (TypeError, ValueError):
            logger.warning("Invalid integer setting {}, using {}", key, default)
            return default

    def get_float(self, key: str, default: float | None) -> float | None:
        """Return a float for `key`; null stays None."""
        value = self.get(key, default)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning("Invalid number setting {}, using {}", key, default)
            return default
