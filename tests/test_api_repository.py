from __future__ import annotations

import requests

from core.models import GeoPoint
from infrastructure.api_repository import RestLocationRepository, record_from_payload


class _Response:
    def __init__(self, payload=None, status_error=None, json_error=None):
        self._payload = payload
        self._status_error = status_error
        self._json_error = json_error

    def raise_for_status(self):
        if self._status_error:
            raise self._status_error

    def json(self):
        if self._json_error:
            raise self._json_error
        return self._payload


class _Session:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, timeout=None, headers=None):
        self.requests.append((url, timeout))
        if self.error:
            raise self.error
        return self.response


ROW = {
    "id": 5,
    "lcpnap_name": "LCP-01 / NAP-03",
    "lcp_name": "LCP-01",
    "nap_name": None,
    "coordinates": "12.88,121.77",
    "street": "Rizal St",
    "city": "Quezon City",
    "port_total": "16",
    "active_sessions": 9,
    "blocked_sessions": "2",
    "custom_field": "kept",
}


def test_record_from_payload_maps_fields():
    rec = record_from_payload(ROW)
    assert rec.id == 5
    assert rec.group_name == "LCP-01 / NAP-03"
    assert rec.sub_group_names == ("LCP-01", "")
    assert rec.point == GeoPoint(12.88, 121.77)
    assert rec.port_total == 16
    assert rec.sessions.active == 9
    assert rec.sessions.blocked == 2
    assert rec.sessions.offline == 0
    assert rec.extra == {"custom_field": "kept"}


def test_fetch_success_keeps_unmappable_rows_and_skips_malformed():
    payload = {
        "success": True,
        "data": [ROW, {**ROW, "id": 6, "coordinates": "bad"}, {"lcpnap_name": "no id"}, "junk"],
    }
    session = _Session(_Response(payload))
    repo = RestLocationRepository("http://api.local/api/", "/lcp-nap-locations", session=session)

    result = repo.fetch()

    assert result.success
    assert [r.id for r in result.records] == [5, 6]
    assert result.records[1].point is None
    assert session.requests == [("http://api.local/api/lcp-nap-locations", None)]


def test_unsuccessful_envelope_is_a_failed_result():
    session = _Session(_Response({"success": False, "message": "denied"}))
    result = RestLocationRepository("http://api", session=session).fetch()
    assert not result.success
    assert result.records == []
    assert result.message == "denied"


def test_transport_error_is_a_failed_result():
    session = _Session(error=requests.ConnectionError("refused"))
    result = RestLocationRepository("http://api", timeout=5, session=session).fetch()
    assert not result.success
    assert "refused" in result.message
    assert session.requests[0][1] == 5


def test_http_error_is_a_failed_result():
    session = _Session(_Response(status_error=requests.HTTPError("500 Server Error")))
    assert not RestLocationRepository("http://api", session=session).fetch().success


def test_invalid_json_is_a_failed_result():
    session = _Session(_Response(json_error=ValueError("no json")))
    result = RestLocationRepository("http://api", session=session).fetch()
    assert not result.success
    assert result.message == "Invalid response from server"


def test_non_list_data_is_a_failed_result():
    session = _Session(_Response({"success": True, "data": {"id": 1}}))
    result = RestLocationRepository("http://api", session=session).fetch()
    assert not result.success
    assert result.message == "Invalid response from server"
