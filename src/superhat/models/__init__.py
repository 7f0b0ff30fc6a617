"""Data models for superhat."""

from .bindings import Binding, BindingTable
from .config import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONFIG_PATH,
    SWITCH_COUNT,
    AppConfig,
    ClickSoundConfig,
    default_key_combos,
)
from .enums import Direction, InputBackend, Panel

__all__ = [
    "DEFAULT_CONFIG_DIR",
    "DEFAULT_CONFIG_PATH",
    "SWITCH_COUNT",
    "AppConfig",
    "Binding",
    "BindingTable",
    "ClickSoundConfig",
    "Direction",
    "InputBackend",
    "Panel",
    "default_key_combos",
]
