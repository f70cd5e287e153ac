"""Grouping service for `LocationRecord` collections.

Groups are always derived fresh from the full record list; existing
`LocationGroup` objects are never mutated when records change.
"""

from __future__ import annotations

from collections.abc import Iterable
import locale

from core.models import LocationGroup, LocationRecord


def _group_sort_key(name: str) -> tuple[str, str]:
    # Locale-aware, case-insensitive primary key; raw name keeps the order total.
    try:
        primary = locale.strxfrm(name.casefold())
    except (ValueError, OSError):
        primary = name.casefold()
    return (primary, name)


class LocationGrouper:
    """Builds sorted `LocationGroup` lists from location records."""

    def group(self, records: Iterable[LocationRecord]) -> list[LocationGroup]:
        """Group mappable `records` by exact `group_name`.

        Args:
            records: Records in source order; unmappable ones are skipped.

        Returns:
            Groups sorted ascending by name, members in source order.
        """
        grouped: dict[str, list[LocationRecord]] = {}
        for record in records:
            if not record.is_mappable:
                continue
            grouped.setdefault(record.group_name, []).append(record)

        names = sorted(grouped, key=_group_sort_key)
        return [LocationGroup(group_name=name, members=grouped[name]) for name in names]

    @staticmethod
    def count_unmappable(records: Iterable[LocationRecord]) -> int:
        """Number of records whose coordinates did not parse."""
        return sum(1 for r in records if not r.is_mappable)
