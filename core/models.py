"""Core domain models for network location records and groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Sentinel for the "every group" sidebar entry.
ALL_GROUPS = "all"


@dataclass(frozen=True)
class GeoPoint:
    """A parsed latitude/longitude pair."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class SessionCounts:
    """Subscriber session counts reported by the backend for a location."""

    active: int = 0
    offline: int = 0
    inactive: int = 0
    blocked: int = 0
    not_found: int = 0


@dataclass
class LocationRecord:
    """A single network-node location as delivered by the backend.

    Only `group_name` and `point` are used by grouping and mapping; the
    remaining descriptive fields pass through for display.
    """

    id: int | str
    group_name: str
    raw_coordinates: str
    point: GeoPoint | None = None
    sub_group_names: tuple[str, ...] = ()
    street: str | None = None
    barangay: str | None = None
    city: str | None = None
    region: str | None = None
    port_total: int | None = None
    reading_image_url: str | None = None
    image1_url: str | None = None
    image2_url: str | None = None
    modified_by: str | None = None
    modified_date: str | None = None
    sessions: SessionCounts = field(default_factory=SessionCounts)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_mappable(self) -> bool:
        """True when the coordinate string parsed to a valid point."""
        return self.point is not None

    @property
    def address_parts(self) -> list[str]:
        """Non-empty address components, most specific first."""
        parts = [self.street, self.barangay, self.city, self.region]
        return [p for p in parts if p]


@dataclass
class LocationGroup:
    """Mappable records sharing one `group_name`, in source order."""

    group_name: str
    members: list[LocationRecord] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of member records."""
        return len(self.members)


@dataclass
class SelectionState:
    """Sidebar selection, search and focus state for one mounted view."""

    active_group: str = ALL_GROUPS
    search_text: str = ""
    focused_record_id: int | str | None = None


@dataclass
class FetchResult:
    """Outcome of a location fetch.

    Attributes:
        success: False on transport failure or a `success=false` envelope.
        records: Parsed records (empty when `success` is False).
        message: Optional error or status message from the backend.
    """

    success: bool
    records: list[LocationRecord] = field(default_factory=list)
    message: str | None = None
