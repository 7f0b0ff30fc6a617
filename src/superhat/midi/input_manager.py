"""MIDI input port manager with hot-plug support."""

import logging
import threading
from collections.abc import Callable
from typing import Optional

import mido

logger = logging.getLogger(__name__)


class MidiInputManager:
    """
    Keeps one MIDI input port open, reconnecting when devices come and go.

    A monitor thread polls the available input ports. When no port is open
    it opens the first one accepted by ``device_filter``. When the open port
    disappears it is closed and the search starts again.

    Messages are delivered to the on_message() callback from mido's own I/O
    thread, so the callback must be fast and thread-safe.
    """

    def __init__(
        self,
        device_filter: Callable[[str], bool],
        poll_interval: float = 2.0,
    ):
        """
        Args:
            device_filter: Returns True for port names that may be opened
            poll_interval: How often to check for device changes (seconds)
        """
        self._device_filter = device_filter
        self._poll_interval = poll_interval
        self._running = threading.Event()
        self._wake = threading.Event()
        self._monitor_thread: Optional[threading.Thread] = None
        self._port: Optional[mido.ports.BaseInput] = None
        self._port_lock = threading.Lock()
        self._no_device_warned = False
        self._message_callback: Optional[Callable[[mido.Message], None]] = None
        self._on_connection_changed: Optional[Callable[[bool, Optional[str]], None]] = None

    @staticmethod
    def list_ports() -> list[str]:
        """Get the names of all MIDI input ports."""
        return mido.get_input_names()

    def on_message(self, callback: Callable[[mido.Message], None]) -> None:
        """Register the callback for incoming messages."""
        self._message_callback = callback

    def on_connection_changed(self, callback: Callable[[bool, Optional[str]], None]) -> None:
        """
        Register the callback for connection changes.

        Args:
            callback: Receives (is_connected, port_name), on a short-lived helper thread
        """
        self._on_connection_changed = callback

    def start(self) -> None:
        """Start monitoring for MIDI input devices."""
        if self._running.is_set():
            logger.warning("MidiInputManager is already running")
            return

        self._running.set()
        self._wake.clear()
        self._monitor_thread = threading.Thread(
            target=self._monitor_devices, name="superhat-midi", daemon=True
        )
        self._monitor_thread.start()
        logger.debug("MidiInputManager started")

    def stop(self) -> None:
        """Stop monitoring and close the port."""
        self._running.clear()
        self._wake.set()

        with self._port_lock:
            self._close_port()

        if self._monitor_thread and self._monitor_thread.is_alive():
            self._monitor_thread.join(timeout=self._poll_interval + 1.0)
        self._monitor_thread = None

        logger.debug("MidiInputManager stopped")

    @property
    def is_connected(self) -> bool:
        with self._port_lock:
            return self._port is not None

    @property
    def current_port(self) -> Optional[str]:
        with self._port_lock:
            return self._port.name if self._port else None

    def _find_matching_port(self, available_ports: list[str]) -> Optional[str]:
        matching = [p for p in available_ports if self._device_filter(p)]
        return matching[0] if matching else None

    def _monitor_devices(self) -> None:
        logger.debug("Starting MIDI input device monitoring")
        last_available: set[str] = set()

        while self._running.is_set():
            try:
                available = self.list_ports()
                available_set = set(available)

                for port in available_set - last_available:
                    logger.info(f"MIDI input port connected: {port}")
                for port in last_available - available_set:
                    logger.info(f"MIDI input port disconnected: {port}")
                last_available = available_set

                with self._port_lock:
                    if self._port and self._port.name not in available_set:
                        logger.warning(f"MIDI input disconnected: {self._port.name}")
                        self._close_port()
                        self._no_device_warned = False
                        self._fire_connection_changed(False, None)

                    if not self._port:
                        port = self._find_matching_port(available)
                        if port:
                            self._connect_to_port(port)
                        elif not self._no_device_warned:
                            logger.warning("No matching MIDI input device found")
                            self._no_device_warned = True

            except Exception as e:
                # rtmidi errors while a device is being unplugged are transient
                logger.error(f"Error in MIDI input monitoring: {e}")

            self._wake.wait(self._poll_interval)

    def _connect_to_port(self, port_name: str) -> None:
        """Open a port. Must be called with _port_lock held."""
        try:
            self._port = mido.open_input(port_name, callback=self._midi_callback)
        except (OSError, IOError) as e:
            logger.error(f"Failed to connect to {port_name}: {e}")
            self._port = None
            return

        logger.info(f"Connected to MIDI input: {port_name}")
        self._fire_connection_changed(True, port_name)

    def _close_port(self) -> None:
        """Close the open port, if any. Must be called with _port_lock held."""
        if self._port is None:
            return
        try:
            self._port.close()
        except (OSError, IOError) as e:
            logger.error(f"Error closing MIDI input port: {e}")
        self._port = None

    def _fire_connection_changed(self, connected: bool, port_name: Optional[str]) -> None:
        if not self._on_connection_changed:
            return
        callback = self._on_connection_changed

        # Off the monitor thread so the callback can call back into the manager
        def fire() -> None:
            try:
                callback(connected, port_name)
            except Exception as e:
                logger.error(f"Error in connection callback: {e}", exc_info=True)

        threading.Thread(target=fire, daemon=True).start()

    def _midi_callback(self, msg: mido.Message) -> None:
        """Called from mido's I/O thread."""
        try:
            if self._message_callback:
                self._message_callback(msg)
        except Exception as e:
            logger.error(f"Error in MIDI input callback: {e}", exc_info=True)

    def __enter__(self) -> "MidiInputManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
