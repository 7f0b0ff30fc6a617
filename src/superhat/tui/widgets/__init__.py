"""Reusable UI widgets for the TUI."""

from .bindings_panel import BindingsPanel
from .panel_widget import PanelWidget
from .status_bar import StatusBar
from .switch_widget import SwitchWidget

__all__ = [
    "BindingsPanel",
    "PanelWidget",
    "StatusBar",
    "SwitchWidget",
]
