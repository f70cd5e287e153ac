from __future__ import annotations

import pytest

from core.models import GeoPoint, LocationRecord
from core.services.coordinate_parser import parse_coordinates, with_point


def test_parses_two_numbers():
    assert parse_coordinates("12.88,121.77") == GeoPoint(12.88, 121.77)


def test_trims_whitespace_around_tokens():
    assert parse_coordinates(" 14.5995 , 120.9842 ") == GeoPoint(14.5995, 120.9842)


@pytest.mark.parametrize(
    "raw",
    [
        "12.88",
        "abc,121.77",
        "12.88,abc",
        "12.88,121.77,5",
        "",
        ",",
        "12.88,",
        "nan,121.77",
        "12.88,inf",
        "1_2,3_4",
        "1e999,121.77",
        "١٢,121.77",
        "0x1A,121.77",
        None,
    ],
)
def test_rejects_invalid_strings(raw):
    assert parse_coordinates(raw) is None


def test_does_not_check_ranges():
    assert parse_coordinates("95.0,200.0") == GeoPoint(95.0, 200.0)


def test_with_point_derives_point_from_raw_coordinates():
    rec = LocationRecord(id=1, group_name="LCP-1", raw_coordinates="1.5,2.5")
    updated = with_point(rec)
    assert updated.point == GeoPoint(1.5, 2.5)
    assert rec.point is None


def test_accepts_signs_and_exponents():
    assert parse_coordinates("-1.5e1,.5") == GeoPoint(-15.0, 0.5)
