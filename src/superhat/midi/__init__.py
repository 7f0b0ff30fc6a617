"""MIDI port management."""

from .input_manager import MidiInputManager

__all__ = ["MidiInputManager"]
