from __future__ import annotations

from app.viewmodels.location_vm import LocationVM
from core.models import SessionCounts
from core.services.popup_content import NO_ADDRESS, NOT_AVAILABLE, render_popup_html


def test_popup_escapes_and_includes_details(record_factory):
    rec = record_factory(
        1,
        "LCP <1>",
        sub_group_names=("LCP-1", "NAP-2"),
        street="Main & 2nd",
        city="Cebu",
        port_total=8,
        sessions=SessionCounts(active=4, blocked=1),
    )
    html = render_popup_html(rec)

    assert "LCP &lt;1&gt;" in html
    assert "Main &amp; 2nd, Cebu" in html
    assert "<strong>Ports:</strong> 8" in html
    assert ">4</span>" in html
    assert "NAP-2" in html


def test_popup_without_address_or_names(record_factory):
    html = render_popup_html(record_factory(1, "LCP-1"))
    assert NO_ADDRESS in html
    assert "<strong>LCP:</strong> N/A" in html
    assert "Ports" not in html


def test_location_vm_display_properties(record_factory):
    vm = LocationVM(record_factory(9, "LCP-9", coords="1.5,2.25", sub_group_names=("L", "")))
    assert vm.record_id == 9
    assert vm.lcp_name == "L"
    assert vm.nap_name == "N/A"
    assert vm.list_label == "L / N/A"
    assert vm.coordinates_text == "1.500000, 2.250000"
    rows = dict(vm.detail_rows())
    assert rows["Address"] == NO_ADDRESS
    assert rows["Ports"] == "N/A"
    assert rows["Modified By"] == NOT_AVAILABLE
    assert rows["Modified Date"] == NOT_AVAILABLE
    assert "Image 1" not in rows
