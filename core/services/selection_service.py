"""Sidebar selection and search, decoupled from any UI toolkit.

`SelectionCoordinator` decides which records are visible on the map and
reports every change of that set exactly once, so the map surface is
rebuilt once per logical change.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from loguru import logger

from core.models import ALL_GROUPS, LocationGroup, LocationRecord, SelectionState


def _matches(record: LocationRecord, needle: str) -> bool:
    fields = [record.group_name, *record.sub_group_names, *record.address_parts]
    return any(needle in str(f).casefold() for f in fields if f)


def compute_visible_records(
    groups: Sequence[LocationGroup],
    all_records: Sequence[LocationRecord],
    active_group: str,
    search_text: str = "",
) -> list[LocationRecord]:
    """Return the mappable records to show for the given selection.

    An `active_group` that matches no group yields an empty list rather than
    every record.
    """
    if active_group == ALL_GROUPS:
        visible = [r for r in all_records if r.is_mappable]
    else:
        group = next((g for g in groups if g.group_name == active_group), None)
        visible = list(group.members) if group is not None else []

    needle = search_text.strip().casefold()
    if needle:
        visible = [r for r in visible if _matches(r, needle)]
    return visible


def filter_groups(groups: Sequence[LocationGroup], search_text: str) -> list[LocationGroup]:
    """Groups whose name or any member matches `search_text`."""
    needle = search_text.strip().casefold()
    if not needle:
        return list(groups)
    return [
        g
        for g in groups
        if needle in g.group_name.casefold() or any(_matches(r, needle) for r in g.members)
    ]


def _signature(records: Sequence[LocationRecord]) -> list[tuple[object, object]]:
    return [(r.id, r.point) for r in records]


class SelectionCoordinator:
    """Tracks `SelectionState` and the derived visible record set."""

    def __init__(
        self,
        on_visible_changed: Callable[[list[LocationRecord]], None],
        on_focus: Callable[[LocationRecord], None] | None = None,
    ) -> None:
        self.state = SelectionState()
        self._on_visible_changed = on_visible_changed
        self._on_focus = on_focus
        self._records: list[LocationRecord] = []
        self._groups: list[LocationGroup] = []
        self._visible: list[LocationRecord] = []

    @property
    def visible_records(self) -> list[LocationRecord]:
        return list(self._visible)

    @property
    def groups(self) -> list[LocationGroup]:
        return list(self._groups)

    def set_data(self, records: Sequence[LocationRecord], groups: Sequence[LocationGroup]) -> None:
        """Replace the underlying data; always reported as a change."""
        self._records = list(records)
        self._groups = list(groups)
        self._recompute(force=True)

    def select_group(self, group_name: str) -> None:
        """Switch the active group (`ALL_GROUPS` for every record)."""
        self.state.active_group = group_name
        self.state.focused_record_id = None
        logger.debug("Active group -> {}", group_name)
        self._recompute()

    def set_search_text(self, text: str) -> None:
        """Narrow the visible set by free text."""
        if text == self.state.search_text:
            return
        self.state.search_text = text
        self._recompute()

    def focus_record(self, record_id: object) -> LocationRecord | None:
        """Request focus on one visible record; the visible set is unchanged."""
        record = next((r for r in self._visible if r.id == record_id), None)
        if record is None:
            logger.debug("Focus request for non-visible record {}", record_id)
            return None
        self.state.focused_record_id = record_id
        if self._on_focus:
            self._on_focus(record)
        return record

    def _recompute(self, force: bool = False) -> None:
        visible = compute_visible_records(
            self._groups, self._records, self.state.active_group, self.state.search_text
        )
        if not force and _signature(visible) == _signature(self._visible):
            return
        self._visible = visible
        if self.state.focused_record_id is not None and not any(
            r.id == self.state.focused_record_id for r in visible
        ):
            self.state.focused_record_id = None
        self._on_visible_changed(list(visible))
