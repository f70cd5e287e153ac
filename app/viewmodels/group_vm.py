from __future__ import annotations

from dataclasses import dataclass


@dataclass
class GroupItemVM:
    key: str
    label: str
    count: int
    is_selected: bool = False
