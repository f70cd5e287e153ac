from __future__ import annotations

import pytest

from core.services.panel_resize import ResizablePanelController


def test_drag_changes_width_relative_to_start():
    widths = []
    panel = ResizablePanelController(width=256, on_resize=widths.append)
    panel.pointer_down(100)
    assert panel.pointer_move(150) == 306
    assert panel.pointer_move(120) == 276
    panel.pointer_up()

    assert panel.width == 276
    assert widths == [306, 276]


def test_drag_past_max_clamps_to_max():
    panel = ResizablePanelController(width=256, min_width=200, max_width=500)
    panel.pointer_down(0)
    assert panel.pointer_move(10_000) == 500


def test_drag_below_min_clamps_to_min():
    panel = ResizablePanelController(width=256, min_width=200, max_width=500)
    panel.pointer_down(300)
    assert panel.pointer_move(-10_000) == 200


def test_move_without_drag_is_ignored():
    panel = ResizablePanelController(width=256)
    assert panel.pointer_move(400) == 256
    panel.pointer_down(0)
    panel.pointer_up()
    assert panel.pointer_move(400) == 256
    assert not panel.is_dragging


def test_initial_width_is_clamped():
    assert ResizablePanelController(width=50).width == 200


def test_invalid_bounds_rejected():
    with pytest.raises(ValueError):
        ResizablePanelController(min_width=600, max_width=500)
