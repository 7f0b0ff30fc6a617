"""Headless console UI."""

from .app import ConsoleUI

__all__ = ["ConsoleUI"]
