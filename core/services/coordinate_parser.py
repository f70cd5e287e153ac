"""Parsing of `"lat,lng"` coordinate strings into `GeoPoint` values.

Parsing never raises: anything that is not exactly two finite numbers
separated by a comma yields None. No latitude/longitude range checks are
applied.
"""

from __future__ import annotations

from dataclasses import replace
import math
import re

from core.models import GeoPoint, LocationRecord

SEPARATOR = ","
# Plain decimal or exponent notation; no digit-group underscores, no nan/inf.
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def _parse_float(token: str) -> float | None:
    if not _NUMBER.fullmatch(token):
        return None
    try:
        value = float(token)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def parse_coordinates(raw: str | None) -> GeoPoint | None:
    """Return the point encoded in `raw`, or None when it is not parseable."""
    if not raw or not isinstance(raw, str):
        return None

    tokens = [t.strip() for t in raw.split(SEPARATOR)]
    if len(tokens) != 2:
        return None

    latitude = _parse_float(tokens[0])
    longitude = _parse_float(tokens[1])
    if latitude is None or longitude is None:
        return None
    return GeoPoint(latitude=latitude, longitude=longitude)


def with_point(record: LocationRecord) -> LocationRecord:
    """Return a copy of `record` with `point` derived from its raw coordinates."""
    return replace(record, point=parse_coordinates(record.raw_coordinates))
