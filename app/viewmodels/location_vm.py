"""Lightweight view model wrapper around `LocationRecord`."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import LocationRecord
from core.services.popup_content import NOT_AVAILABLE, format_address


@dataclass
class LocationVM:
    """Expose convenient properties for the record list and details panel."""

    record: LocationRecord

    @property
    def record_id(self) -> int | str:
        return self.record.id

    @property
    def title(self) -> str:
        """Group name shown as the list/detail heading."""
        return self.record.group_name

    @property
    def lcp_name(self) -> str:
        names = self.record.sub_group_names
        return (names[0] if names else "") or NOT_AVAILABLE

    @property
    def nap_name(self) -> str:
        names = self.record.sub_group_names
        return (names[1] if len(names) > 1 else "") or NOT_AVAILABLE

    @property
    def address(self) -> str:
        return format_address(self.record)

    @property
    def list_label(self) -> str:
        """One-line label for the sidebar record list."""
        return f"{self.lcp_name} / {self.nap_name}"

    @property
    def coordinates_text(self) -> str:
        point = self.record.point
        if point is None:
            return self.record.raw_coordinates or NOT_AVAILABLE
        return f"{point.latitude:.6f}, {point.longitude:.6f}"

    def detail_rows(self) -> list[tuple[str, str]]:
        """Label/value pairs for the details panel."""
        rec = self.record
        sessions = rec.sessions
        rows = [
            ("LCP/NAP", rec.group_name),
            ("LCP", self.lcp_name),
            ("NAP", self.nap_name),
            ("Coordinates", self.coordinates_text),
            ("Address", self.address),
            ("Ports", str(rec.port_total) if rec.port_total is not None else NOT_AVAILABLE),
            ("Online", str(sessions.active)),
            ("Offline", str(sessions.offline)),
            ("Inactive", str(sessions.inactive)),
            ("Blocked", str(sessions.blocked)),
            ("Not Found", str(sessions.not_found)),
            ("Modified By", rec.modified_by or NOT_AVAILABLE),
            ("Modified Date", rec.modified_date or NOT_AVAILABLE),
        ]
        for label, url in (
            ("Reading Image", rec.reading_image_url),
            ("Image 1", rec.image1_url),
            ("Image 2", rec.image2_url),
        ):
            if url:
                rows.append((label, url))
        return rows
