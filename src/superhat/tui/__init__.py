"""Textual terminal UI."""

from .app import SuperhatApp

__all__ = ["SuperhatApp"]
