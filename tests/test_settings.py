from __future__ import annotations

import json

import pytest

from infrastructure.settings import JsonSettings


def test_file_values_override_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"map": {"focus_zoom": 17}}), encoding="utf-8")
    settings = JsonSettings(path)

    assert settings.get("map.focus_zoom") == 17
    assert settings.get("map.default_zoom") == 6
    assert settings.get("sidebar.max_width") == 500
    assert settings.get("missing.key", "fallback") == "fallback"


def test_missing_file_uses_defaults(tmp_path):
    settings = JsonSettings(tmp_path / "absent.json")
    assert settings.get("api.locations_endpoint") == "/lcp-nap-locations"
    assert settings.get_float("api.timeout_seconds", None) is None


def test_typed_getters_fall_back_on_bad_values(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"sidebar": {"width": "wide"}, "api": {"timeout_seconds": "7.5"}}),
        encoding="utf-8",
    )
    settings = JsonSettings(path)
    assert settings.get_int("sidebar.width", 256) == 256
    assert settings.get_float("api.timeout_seconds", None) == 7.5


def test_non_object_file_is_rejected(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        JsonSettings(path)
