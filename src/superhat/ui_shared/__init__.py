"""Code shared by the UI implementations.

- adapter: UIAdapter protocol for UI lifecycle management
- legend: where each switch sits on a panel and which taps reach it
"""

from .adapter import UIAdapter
from .legend import (
    ACTIVE_CLASS,
    CANDIDATE_CLASS,
    GRID_SIZE,
    SIDE_CLASS,
    PanelLayout,
    SwitchCell,
    panel_layout,
)

__all__ = [
    "ACTIVE_CLASS",
    "CANDIDATE_CLASS",
    "GRID_SIZE",
    "SIDE_CLASS",
    "PanelLayout",
    "SwitchCell",
    "UIAdapter",
    "panel_layout",
]
