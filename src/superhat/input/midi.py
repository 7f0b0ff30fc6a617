"""MIDI controller input (pads or keys acting as hat buttons)."""

import logging
import time
from collections.abc import Callable
from typing import Optional

import mido

from superhat.exceptions import InputBackendUnavailableError
from superhat.midi import MidiInputManager
from superhat.protocols import ButtonKind, DeviceEvent

from .base import InputSource

logger = logging.getLogger(__name__)

# Control change numbers are reported above the note range
CONTROL_BUTTON_OFFSET = 128


class MidiInput(InputSource):
    """
    Turns MIDI notes and controller switches into raw button edges.

    - note_on with velocity > 0: Down; note_off or note_on velocity 0: Up
    - control_change value > 0: Down; value 0: Up

    ``device_id`` is the MIDI channel + 1. ``button_id`` is the note number,
    or the controller number + 128.
    """

    name = "midi"

    def __init__(
        self,
        port_filter: Optional[str] = None,
        poll_interval: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
        manager: Optional[MidiInputManager] = None,
    ):
        """
        Args:
            port_filter: Case-insensitive substring of the port to open (None = any port)
            poll_interval: Hot-plug scan interval (seconds)
            clock: Time source for event timestamps
            manager: Port manager to use (created from port_filter if None)
        """
        super().__init__(clock)
        self._port_filter = port_filter
        self._manager = manager or MidiInputManager(
            device_filter=self._matches_port, poll_interval=poll_interval
        )
        self._manager.on_message(self.handle_message)
        self._manager.on_connection_changed(self._on_connection_changed)
        self._current_port: Optional[str] = None
        self._held: set[tuple[int, int]] = set()

    @staticmethod
    def list_devices() -> list[str]:
        """Get the names of all MIDI input ports."""
        return MidiInputManager.list_ports()

    @property
    def connected_devices(self) -> list[str]:
        port = self._manager.current_port
        return [port] if port else []

    def _matches_port(self, port_name: str) -> bool:
        if not self._port_filter:
            return True
        return self._port_filter.lower() in port_name.lower()

    def start(self) -> None:
        try:
            self.list_devices()
        except (OSError, ImportError) as e:
            # mido raises ImportError when the rtmidi backend is missing
            raise InputBackendUnavailableError("midi", str(e)) from e
        self._manager.start()
        logger.info("MIDI input started")

    def stop(self) -> None:
        self._manager.stop()
        self._release_all()
        logger.info("MIDI input stopped")

    def handle_message(self, msg: mido.Message) -> None:
        """Translate one MIDI message. Runs on mido's I/O thread."""
        if msg.type == "note_on" and msg.velocity > 0:
            self._edge(msg.channel + 1, msg.note, ButtonKind.DOWN)
        elif msg.type in ("note_on", "note_off"):
            self._edge(msg.channel + 1, msg.note, ButtonKind.UP)
        elif msg.type == "control_change":
            kind = ButtonKind.DOWN if msg.value > 0 else ButtonKind.UP
            self._edge(msg.channel + 1, msg.control + CONTROL_BUTTON_OFFSET, kind)

    def _edge(self, device_id: int, button_id: int, kind: ButtonKind) -> None:
        key = (device_id, button_id)
        # Continuous controllers send many non-zero values while held
        if kind is ButtonKind.DOWN:
            if key in self._held:
                return
            self._held.add(key)
        else:
            if key not in self._held:
                return
            self._held.discard(key)
        self._emit(device_id, button_id, kind)

    def _release_all(self) -> None:
        for device_id, button_id in sorted(self._held):
            self._edge(device_id, button_id, ButtonKind.UP)

    def _on_connection_changed(self, connected: bool, port_name: Optional[str]) -> None:
        if connected and port_name:
            self._current_port = port_name
            self._notify_device(DeviceEvent.CONNECTED, port_name)
        else:
            self._release_all()
            name = self._current_port or "MIDI input"
            self._current_port = None
            self._notify_device(DeviceEvent.DISCONNECTED, name)
