from __future__ import annotations

from core.services.grouping_service import LocationGrouper


def test_empty_input_gives_empty_output():
    assert LocationGrouper().group([]) == []


def test_groups_by_exact_name_in_source_order(record_factory):
    records = [
        record_factory(1, "LCP-B"),
        record_factory(2, "LCP-A"),
        record_factory(3, "LCP-B"),
        record_factory(4, "lcp-b"),
    ]
    groups = LocationGrouper().group(records)

    by_name = {g.group_name: g for g in groups}
    assert set(by_name) == {"LCP-A", "LCP-B", "lcp-b"}
    assert [r.id for r in by_name["LCP-B"].members] == [1, 3]
    assert by_name["LCP-B"].count == 2


def test_sorted_case_insensitively(record_factory):
    records = [
        record_factory(1, "charlie"),
        record_factory(2, "Alpha"),
        record_factory(3, "bravo"),
    ]
    names = [g.group_name for g in LocationGrouper().group(records)]
    assert names == ["Alpha", "bravo", "charlie"]


def test_unmappable_records_are_excluded_and_counted(record_factory):
    records = [
        record_factory(1, "LCP-A"),
        record_factory(2, "LCP-A", coords="bad"),
        record_factory(3, "LCP-C", coords="1,2,3"),
        record_factory(4, "LCP-B"),
    ]
    grouper = LocationGrouper()
    groups = grouper.group(records)

    assert [g.group_name for g in groups] == ["LCP-A", "LCP-B"]
    assert grouper.count_unmappable(records) == 2
    assert sum(g.count for g in groups) + grouper.count_unmappable(records) == len(records)


def test_regrouping_is_idempotent(record_factory):
    records = [record_factory(i, name) for i, name in enumerate(["b", "a", "c", "a", "b"])]
    grouper = LocationGrouper()
    first = grouper.group(records)
    flattened = [r for g in first for r in g.members]
    second = grouper.group(flattened)

    assert [(g.group_name, [r.id for r in g.members]) for g in first] == [
        (g.group_name, [r.id for r in g.members]) for g in second
    ]
