"""Raw input sources."""

import time
from collections.abc import Callable

from superhat.models import InputBackend

from .base import InputSource, RawEventCallback


def create_input_source(
    backend: InputBackend,
    midi_port_filter: str | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> InputSource:
    """
    Create the input source for a backend.

    Backends are imported on demand so that pygame is only loaded when a
    gamepad is used. ``clock`` stamps every raw event and must be the one the
    state machine measures long presses with.
    """
    if backend is InputBackend.MIDI:
        from .midi import MidiInput

        return MidiInput(port_filter=midi_port_filter, clock=clock)

    from .gamepad import GamepadInput

    return GamepadInput(clock=clock)


__all__ = ["InputSource", "RawEventCallback", "create_input_source"]
