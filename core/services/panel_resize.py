"""Drag-to-resize state for the sidebar, independent of any toolkit."""

from __future__ import annotations

from collections.abc import Callable

DEFAULT_WIDTH = 256
MIN_WIDTH = 200
MAX_WIDTH = 500


class ResizablePanelController:
    """Tracks one pointer drag session and the clamped panel width."""

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        min_width: int = MIN_WIDTH,
        max_width: int = MAX_WIDTH,
        on_resize: Callable[[int], None] | None = None,
    ) -> None:
        if min_width > max_width:
            raise ValueError(f"min_width {min_width} exceeds max_width {max_width}")
        self.min_width = min_width
        self.max_width = max_width
        self._on_resize = on_resize
        self._width = self.clamp(width)
        self._dragging = False
        self._start_x = 0
        self._start_width = self._width

    @property
    def width(self) -> int:
        return self._width

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    def clamp(self, width: int) -> int:
        return max(self.min_width, min(self.max_width, int(width)))

    def set_width(self, width: int) -> int:
        """Set the width directly (clamped) and return the applied value."""
        new_width = self.clamp(width)
        if new_width != self._width:
            self._width = new_width
            if self._on_resize:
                self._on_resize(new_width)
        return self._width

    def pointer_down(self, x: int) -> None:
        self._dragging = True
        self._start_x = int(x)
        self._start_width = self._width

    def pointer_move(self, x: int) -> int:
        """Update the width for pointer position `x` while dragging."""
        if not self._dragging:
            return self._width
        return self.set_width(self._start_width + (int(x) - self._start_x))

    def pointer_up(self) -> None:
        self._dragging = False
