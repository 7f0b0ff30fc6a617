"""CLI commands for superhat."""

from .bindings import bindings_group
from .config import config_group
from .decode import decode
from .devices import devices
from .monitor import monitor

__all__ = ["bindings_group", "config_group", "decode", "devices", "monitor"]
