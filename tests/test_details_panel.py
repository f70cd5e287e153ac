from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication, QFormLayout, QLabel  # noqa: E402

from app.viewmodels.location_vm import LocationVM  # noqa: E402
from app.views.widgets.details_panel import LocationDetailsPanel  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    return QApplication.instance() or QApplication([])


def _value(panel: LocationDetailsPanel, label: str) -> str:
    form = panel._form
    for row in range(form.rowCount()):
        if form.itemAt(row, QFormLayout.ItemRole.LabelRole).widget().text() == f"{label}:":
            widget = form.itemAt(row, QFormLayout.ItemRole.FieldRole).widget()
            assert isinstance(widget, QLabel)
            return widget.text()
    raise KeyError(label)


def test_same_record_id_with_new_fields_rerenders(qapp, record_factory):
    panel = LocationDetailsPanel()
    panel.show()
    panel.set_item(LocationVM(record_factory(1, "LCP-A", port_total=8)))
    assert _value(panel, "Ports") == "8"

    panel.set_item(LocationVM(record_factory(1, "LCP-A", port_total=16)))

    assert _value(panel, "Ports") == "16"


def test_none_hides_panel(qapp, record_factory):
    panel = LocationDetailsPanel()
    panel.show()
    panel.set_item(LocationVM(record_factory(1, "LCP-A")))
    assert panel.isVisible()

    panel.set_item(None)
    assert not panel.isVisible()
