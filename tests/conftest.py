from __future__ import annotations

from collections.abc import Callable
import itertools
from typing import Any

import pytest

from core.models import FetchResult, LocationRecord
from core.services.coordinate_parser import parse_coordinates
from core.services.interfaces import MapProvider, ProviderLoadError
from core.services.provider_bootstrap import ProviderBootstrap


class FakeMapProvider(MapProvider):
    """In-memory map provider that tracks live markers and camera calls."""

    def __init__(self) -> None:
        self.load_calls = 0
        self.unload_calls = 0
        self.maps_created = 0
        self.fail_create_map = False
        self.fail_marker_at: int | None = None
        self.markers_created = 0
        self.live: dict[int, tuple[Any, Any]] = {}
        self.fit_calls: list[list[Any]] = []
        self.pan_calls: list[tuple[Any, int]] = []
        self.opened_popups: list[tuple[Any, str]] = []
        self.close_popup_calls = 0
        self._pending: list[tuple[Callable[[], None], Callable[[Exception], None]]] = []
        self._ids = itertools.count(1)

    # test controls

    def complete_load(self) -> None:
        pending, self._pending = self._pending, []
        for on_ready, _ in pending:
            on_ready()

    def fail_load(self, error: Exception | None = None) -> None:
        pending, self._pending = self._pending, []
        for _, on_error in pending:
            on_error(error or ProviderLoadError("script failed"))

    def click(self, handle: int) -> None:
        _, options = self.live[handle]
        options.on_activate()

    def handle_for_title(self, title: str) -> int:
        return next(h for h, (_, opts) in self.live.items() if opts.title == title)

    # MapProvider

    def load_provider(self, on_ready, on_error) -> None:
        self.load_calls += 1
        self._pending.append((on_ready, on_error))

    def unload_provider(self) -> None:
        self.unload_calls += 1

    def create_map(self, anchor, options):
        if self.fail_create_map:
            raise RuntimeError("no anchor")
        self.maps_created += 1
        return f"map-{self.maps_created}"

    def create_marker(self, map_handle, point, options):
        if self.fail_marker_at is not None and self.markers_created == self.fail_marker_at:
            raise RuntimeError("marker failed")
        self.markers_created += 1
        handle = next(self._ids)
        self.live[handle] = (point, options)
        return handle

    def remove_marker(self, marker_handle) -> None:
        # KeyError here means a marker was released twice.
        del self.live[marker_handle]

    def fit_bounds(self, map_handle, points, insets) -> None:
        self.fit_calls.append(list(points))

    def pan_to(self, map_handle, point, zoom) -> None:
        self.pan_calls.append((point, zoom))

    def create_popup(self):
        return "popup"

    def open_popup(self, popup_handle, anchor, html) -> None:
        self.opened_popups.append((anchor, html))

    def close_popup(self, popup_handle) -> None:
        self.close_popup_calls += 1


class DeferredFetch:
    """Fetch starter whose results are delivered by the test."""

    def __init__(self) -> None:
        self.callbacks: list[Callable[[FetchResult], None]] = []

    def __call__(self, callback: Callable[[FetchResult], None]) -> None:
        self.callbacks.append(callback)

    def resolve(self, result: FetchResult, index: int = -1) -> None:
        self.callbacks.pop(index)(result)


def make_record(
    record_id: int,
    group: str,
    coords: str = "12.88,121.77",
    **kwargs: Any,
) -> LocationRecord:
    return LocationRecord(
        id=record_id,
        group_name=group,
        raw_coordinates=coords,
        point=parse_coordinates(coords),
        **kwargs,
    )


@pytest.fixture
def provider() -> FakeMapProvider:
    return FakeMapProvider()


@pytest.fixture
def bootstrap(provider: FakeMapProvider) -> ProviderBootstrap:
    return ProviderBootstrap(provider)


@pytest.fixture
def record_factory() -> Callable[..., LocationRecord]:
    return make_record


@pytest.fixture
def deferred_fetch() -> DeferredFetch:
    return DeferredFetch()
